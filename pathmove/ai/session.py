"""PathfindingSession — per-character path following with stuck recovery.

A session owns one character's current route and walks it one grid step per
tick. When the next step is blocked it waits out a short grace window, then
replans; if no route exists at all it may force a single step in through
mode (``through_if_hard_blocked``), restoring normal passability once that
step lands.

State flow:
    IDLE -> PLANNING -> FOLLOWING -> (STUCK) -> REPLANNING | FORCING_THROUGH
         -> FOLLOWING -> IDLE
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pathmove.core.enums import SessionOutcome, SessionState

if TYPE_CHECKING:
    from pathmove.ai.nearest import ClosestPointFinder
    from pathmove.ai.pathfinding import Pathfinder
    from pathmove.core.character import Movable
    from pathmove.core.models import Vector2

logger = logging.getLogger(__name__)


class PathfindingSession:
    """Mutable route-following state for a single character."""

    __slots__ = (
        "_mover", "_pathfinder", "_closest",
        "through_if_hard_blocked", "stuck_threshold",
        "target", "destination", "path", "cursor", "stuck_count",
        "recalculate_if_blocked", "forcing_through", "original_through",
        "state", "outcome", "replans", "forced_moves",
    )

    def __init__(
        self,
        mover: Movable,
        pathfinder: Pathfinder,
        closest: ClosestPointFinder,
        *,
        through_if_hard_blocked: bool = True,
        stuck_threshold: int = 3,
    ) -> None:
        self._mover = mover
        self._pathfinder = pathfinder
        self._closest = closest
        self.through_if_hard_blocked = through_if_hard_blocked
        self.stuck_threshold = stuck_threshold

        self.target: Vector2 | None = None
        self.destination: Vector2 | None = None
        self.path: list[Vector2] | None = None
        self.cursor = 0
        self.stuck_count = 0
        self.recalculate_if_blocked = True
        self.forcing_through = False
        self.original_through = mover.through
        self.state = SessionState.IDLE
        self.outcome: SessionOutcome | None = None
        self.replans = 0
        self.forced_moves = 0

    @property
    def active(self) -> bool:
        return self.state != SessionState.IDLE

    @property
    def remaining(self) -> list[Vector2]:
        """Cells still to be stepped on."""
        if self.path is None:
            return []
        return self.path[self.cursor:]

    # -- lifecycle --

    def start(self, target: Vector2, recalculate_if_blocked: bool = True) -> bool:
        """Plan a route to *target*, replacing any session in progress.

        Falls back to the closest reachable cell around *target*. Returns
        False (and stays IDLE) when nothing reachable was found.
        """
        mover = self._mover
        if self.active:
            self._finish(SessionOutcome.SUPERSEDED)

        self.state = SessionState.PLANNING
        self.target = target
        self.recalculate_if_blocked = recalculate_if_blocked
        self.replans = 0
        self.forced_moves = 0

        destination = target
        path = self._pathfinder.find_path(mover, mover.pos, target)
        if path is None:
            substitute = self._closest.find_closest(mover, mover.pos, target)
            if substitute is not None:
                destination = substitute
                path = self._pathfinder.find_path(mover, mover.pos, substitute)

        if path is None:
            logger.info("No reachable cell near %s from %s; giving up", target, mover.pos)
            self._finish(SessionOutcome.UNREACHABLE)
            return False

        if destination != target:
            logger.debug("Target %s unreachable from %s, heading to %s instead", target, mover.pos, destination)

        self.destination = destination
        self.path = path
        self.cursor = 0
        self.stuck_count = 0
        self.original_through = mover.through
        self.forcing_through = False
        self.state = SessionState.FOLLOWING
        return True

    def cancel(self) -> None:
        if self.active:
            self._finish(SessionOutcome.SUPERSEDED)

    def _finish(self, outcome: SessionOutcome) -> None:
        if self.forcing_through:
            self._mover.through = self.original_through
        self.forcing_through = False
        self.path = None
        self.target = None
        self.destination = None
        self.cursor = 0
        self.stuck_count = 0
        self.state = SessionState.IDLE
        self.outcome = outcome

    # -- per tick --

    def advance(self) -> None:
        """Drive the mover at most one grid step along the route."""
        if self.state == SessionState.IDLE:
            return

        mover = self._mover
        path = self.path
        assert path is not None

        while True:
            if self.cursor >= len(path):
                self._mover.through = self.original_through
                self._finish(SessionOutcome.ARRIVED)
                logger.debug("Arrived at %s", mover.pos)
                return

            if mover.is_moving():
                return

            next_cell = path[self.cursor]
            if mover.pos != next_cell:
                break

            self.cursor += 1
            self.stuck_count = 0
            if self.forcing_through:
                mover.through = self.original_through
                self.forcing_through = False
            self.state = SessionState.FOLLOWING

        if mover.pos.manhattan(next_cell) != 1:
            # Off the route (relocated mid-walk): plan again from where we stand
            self.state = SessionState.REPLANNING
            new_path = self._replan()
            if new_path is None:
                logger.info("Lost route at %s; no way back to %s", mover.pos, self.destination)
                self._finish(SessionOutcome.UNREACHABLE)
                return
            self._adopt(new_path)
            return

        direction = mover.pos.direction_to(next_cell)
        assert direction is not None

        if mover.can_pass(mover.pos, direction):
            mover.move_straight(direction)
            self.stuck_count = 0
            if not self.forcing_through:
                self.state = SessionState.FOLLOWING
            return

        self.stuck_count += 1
        self.state = SessionState.STUCK
        if self.stuck_count < self.stuck_threshold or not self.recalculate_if_blocked:
            return

        self.state = SessionState.REPLANNING
        new_path = self._replan()
        if new_path is not None:
            self._adopt(new_path)
            return

        if self.through_if_hard_blocked:
            self.forcing_through = True
            mover.through = True
            mover.move_straight(direction)
            self.stuck_count = 0
            self.forced_moves += 1
            self.state = SessionState.FORCING_THROUGH
            logger.info("Hard blocked at %s; forcing through %s", mover.pos, direction.name)
            return

        self.state = SessionState.STUCK

    def _adopt(self, path: list[Vector2]) -> None:
        mover = self._mover
        self.path = path
        self.cursor = 0
        self.stuck_count = 0
        mover.through = self.original_through
        self.forcing_through = False
        self.replans += 1
        self.state = SessionState.FOLLOWING
        logger.debug("Replanned from %s: %d steps to %s", mover.pos, len(path), self.destination)

    def _replan(self) -> list[Vector2] | None:
        """New route to the target, or to the substitute destination if that differs."""
        mover = self._mover
        assert self.target is not None
        path = self._pathfinder.find_path(mover, mover.pos, self.target)
        if path is not None:
            self.destination = self.target
            return path
        if self.destination is not None and self.destination != self.target:
            return self._pathfinder.find_path(mover, mover.pos, self.destination)
        return None
