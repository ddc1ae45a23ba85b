"""Characters: the movable capability and the two agent kinds (events, player)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pathmove.core.enums import Direction, Domain
from pathmove.core.models import DIRECTION_OFFSETS, Vector2

if TYPE_CHECKING:
    from pathmove.ai.session import PathfindingSession
    from pathmove.core.world_state import WorldState
    from pathmove.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


class Movable(ABC):
    """What a pathfinding session needs from the agent it drives."""

    @property
    @abstractmethod
    def pos(self) -> Vector2: ...

    @property
    @abstractmethod
    def through(self) -> bool:
        """True when the agent ignores terrain and other characters."""

    @through.setter
    @abstractmethod
    def through(self, value: bool) -> None: ...

    @abstractmethod
    def is_moving(self) -> bool:
        """True while a previously issued step is still animating."""

    @abstractmethod
    def can_pass(self, pos: Vector2, direction: Direction) -> bool: ...

    @abstractmethod
    def move_straight(self, direction: Direction) -> bool:
        """Issue one grid step. Returns True if the step was taken."""


class Character(Movable):
    """A grid agent with discrete position and a sub-tile step animation.

    The logical position changes the moment a step is issued; the visual
    position (``real_pos``) catches up over ``step_ticks`` updates.
    """

    kind = "character"

    def __init__(
        self,
        char_id: int,
        pos: Vector2,
        *,
        solid: bool = True,
        through: bool = False,
        step_ticks: int = 1,
    ) -> None:
        self.id = char_id
        self._pos = pos
        self._through = through
        self.solid = solid
        self.step_ticks = step_ticks
        self.direction = Direction.DOWN
        self.moves_issued = 0
        self._move_from: Vector2 = pos
        self._move_ticks_left = 0
        self._world: WorldState | None = None
        self.pathfinding: PathfindingSession | None = None

    # -- Movable --

    @property
    def pos(self) -> Vector2:
        return self._pos

    @property
    def through(self) -> bool:
        return self._through

    @through.setter
    def through(self, value: bool) -> None:
        self._through = value

    def is_moving(self) -> bool:
        return self._move_ticks_left > 0

    def can_pass(self, pos: Vector2, direction: Direction) -> bool:
        world = self._require_world()
        if not world.in_bounds(pos.step(direction)):
            return False
        if self._through:
            return True
        if not world.is_map_passable(pos, direction):
            return False
        return world.is_occupant_passable(self, pos, direction)

    def move_straight(self, direction: Direction) -> bool:
        self.direction = direction
        if not self.can_pass(self._pos, direction):
            return False
        old = self._pos
        self._pos = old.step(direction)
        self._move_from = old
        self._move_ticks_left = self.step_ticks
        self.moves_issued += 1
        self._require_world().character_moved(self, old)
        return True

    # -- world binding --

    def attach(self, world: WorldState, session: PathfindingSession) -> None:
        self._world = world
        self.pathfinding = session

    def _require_world(self) -> WorldState:
        if self._world is None:
            raise RuntimeError(f"Character {self.id} is not attached to a world")
        return self._world

    def locate(self, pos: Vector2) -> None:
        """Place the character instantly, cancelling any step animation."""
        old = self._pos
        self._pos = pos
        self._move_from = pos
        self._move_ticks_left = 0
        if self._world is not None:
            self._world.character_moved(self, old)

    @property
    def real_pos(self) -> tuple[float, float]:
        """Interpolated on-screen position during a step animation."""
        if self._move_ticks_left == 0:
            return float(self._pos.x), float(self._pos.y)
        remaining = self._move_ticks_left / self.step_ticks
        return (
            self._pos.x + (self._move_from.x - self._pos.x) * remaining,
            self._pos.y + (self._move_from.y - self._pos.y) * remaining,
        )

    # -- pathfinding seam --

    def start_pathfinding(self, target_x: int, target_y: int, recalculate_if_blocked: bool = True) -> bool:
        if self.pathfinding is None:
            raise RuntimeError(f"Character {self.id} has no pathfinding session attached")
        return self.pathfinding.start(Vector2(target_x, target_y), recalculate_if_blocked)

    def update_pathfinding(self) -> None:
        if self.pathfinding is not None:
            self.pathfinding.advance()

    # -- per-tick hook --

    def update_move(self) -> None:
        if self._move_ticks_left > 0:
            self._move_ticks_left -= 1

    def update(self) -> None:
        """Per-tick hook called by the WorldLoop."""
        self.update_move()
        self.update_pathfinding()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, pos={self._pos})"


class Player(Character):
    """The player character. Ids are negative so they never clash with events."""

    kind = "player"

    def __init__(self, pos: Vector2, *, step_ticks: int = 1) -> None:
        super().__init__(-1, pos, solid=True, step_ticks=step_ticks)


class MapEvent(Character):
    """A map event. May wander randomly while it has no pathfinding session."""

    kind = "event"

    def __init__(
        self,
        event_id: int,
        pos: Vector2,
        *,
        solid: bool = True,
        through: bool = False,
        step_ticks: int = 1,
        rng: DeterministicRNG | None = None,
        move_chance: float = 0.0,
    ) -> None:
        super().__init__(event_id, pos, solid=solid, through=through, step_ticks=step_ticks)
        self._rng = rng
        self.move_chance = move_chance
        self._frame = 0

    @property
    def wanders(self) -> bool:
        return self._rng is not None and self.move_chance > 0.0

    def update(self) -> None:
        super().update()
        self._frame += 1
        session = self.pathfinding
        if session is not None and session.active:
            return
        if self.wanders and not self.is_moving():
            self._update_random_walk()

    def _update_random_walk(self) -> None:
        assert self._rng is not None
        if not self._rng.next_bool(Domain.WANDER, self.id, self._frame, self.move_chance):
            return
        idx = self._rng.next_int(Domain.WANDER, self.id, self._frame + 1_000_000, 0, len(DIRECTION_OFFSETS) - 1)
        direction = Direction(idx)
        if not self.move_straight(direction):
            logger.debug("Event %d random step %s blocked at %s", self.id, direction.name, self._pos)
