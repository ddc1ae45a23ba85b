"""Nearest reachable substitute for an unreachable goal."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from pathmove.core.models import Vector2

if TYPE_CHECKING:
    from pathmove.ai.pathfinding import Pathfinder
    from pathmove.core.character import Movable

logger = logging.getLogger(__name__)


def manhattan_ring(center: Vector2, radius: int) -> Iterator[Vector2]:
    """Yield every cell at exactly *radius* Manhattan distance from *center*.

    Order: dx ascending, then dy ascending. Radius 0 yields *center* alone.
    """
    for dx in range(-radius, radius + 1):
        rest = radius - abs(dx)
        if rest == 0:
            yield Vector2(center.x + dx, center.y)
        else:
            yield Vector2(center.x + dx, center.y - rest)
            yield Vector2(center.x + dx, center.y + rest)


class ClosestPointFinder:
    """Searches Manhattan rings around a goal for a cell the mover can reach.

    Every candidate costs a full bounded search, so the scan stops at the
    first ring that produces one instead of looking for a global optimum.
    """

    __slots__ = ("_pathfinder", "_max_radius")

    def __init__(self, pathfinder: Pathfinder, max_radius: int = 5) -> None:
        self._pathfinder = pathfinder
        self._max_radius = max_radius

    @property
    def max_radius(self) -> int:
        return self._max_radius

    def find_closest(self, mover: Movable, origin: Vector2, goal: Vector2) -> Vector2 | None:
        query = self._pathfinder.query
        for radius in range(self._max_radius + 1):
            best: Vector2 | None = None
            best_dist = radius + 1
            for candidate in manhattan_ring(goal, radius):
                if not query.in_bounds(candidate):
                    continue
                if self._pathfinder.find_path(mover, origin, candidate, allow_passthrough=False) is None:
                    continue
                dist = candidate.manhattan(goal)
                if dist < best_dist:
                    best, best_dist = candidate, dist
            if best is not None:
                logger.debug("Closest reachable point to %s from %s is %s (radius %d)", goal, origin, best, radius)
                return best
        return None
