"""Bounded A* pathfinding over the 4-connected grid.

Provides a `Pathfinder` class that computes shortest paths between cells,
asking a `GridQuery` about terrain and occupant passability for a specific
mover.

Usage:
    pf = Pathfinder(world, max_iterations=500)
    path = pf.find_path(mover, start, goal)       # list[Vector2] or None
    next_step = pf.next_step(mover, start, goal)  # Vector2 or None
"""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING

from pathmove.core.enums import Direction
from pathmove.core.models import Vector2

if TYPE_CHECKING:
    from pathmove.core.character import Movable
    from pathmove.core.grid import GridQuery

logger = logging.getLogger(__name__)

# Neighbour expansion order: up, right, down, left
_DIRS = tuple(Direction)


class Pathfinder:
    """A* pathfinder with unit step cost and a Manhattan heuristic.

    Stateless between calls apart from ``last_iterations``, so one instance
    can serve every character of a world within the same tick.
    Performance-bounded: expands at most ``max_iterations`` nodes per call.

    Ties on f are broken in favour of the most recently inserted node, which
    keeps the search diving toward the goal on open ground. Which of several
    equal-length paths comes back is otherwise unspecified.
    """

    __slots__ = ("_query", "_max_iterations", "last_iterations")

    def __init__(self, query: GridQuery, max_iterations: int = 500) -> None:
        self._query = query
        self._max_iterations = max_iterations
        self.last_iterations = 0

    @property
    def query(self) -> GridQuery:
        return self._query

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    def find_path(
        self,
        mover: Movable,
        start: Vector2,
        goal: Vector2,
        allow_passthrough: bool = False,
    ) -> list[Vector2] | None:
        """Compute a shortest path from *start* to *goal* for *mover*.

        Returns the cells to step on (excluding *start*, including *goal*),
        ``[]`` when already there, or None if no path was found within the
        iteration budget.

        With *allow_passthrough*, cells blocked only by other characters
        count as open; terrain still has to be passable.
        """
        self.last_iterations = 0
        if start == goal:
            return []

        query = self._query
        gx, gy = goal.x, goal.y

        # Open heap entries: (f, -counter, x, y). Negated counter = newest wins ties.
        counter = 0
        open_heap: list[tuple[int, int, int, int]] = [(start.manhattan(goal), 0, start.x, start.y)]
        g_score: dict[tuple[int, int], int] = {(start.x, start.y): 0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        closed: set[tuple[int, int]] = set()
        iterations = 0

        while open_heap and iterations < self._max_iterations:
            _, _, cx, cy = heapq.heappop(open_heap)
            ckey = (cx, cy)
            if ckey in closed:
                continue  # stale entry left behind by a relaxation
            iterations += 1

            if cx == gx and cy == gy:
                self.last_iterations = iterations
                return self._reconstruct(came_from, ckey)

            closed.add(ckey)
            current = Vector2(cx, cy)
            tentative_g = g_score[ckey] + 1

            for d in _DIRS:
                npos = current.step(d)
                nkey = (npos.x, npos.y)
                if nkey in closed or not query.in_bounds(npos):
                    continue
                if not query.is_map_passable(current, d):
                    continue
                if not allow_passthrough and not query.is_occupant_passable(mover, current, d):
                    continue

                if tentative_g < g_score.get(nkey, tentative_g + 1):
                    g_score[nkey] = tentative_g
                    came_from[nkey] = ckey
                    h = abs(npos.x - gx) + abs(npos.y - gy)  # Manhattan heuristic
                    counter += 1
                    heapq.heappush(open_heap, (tentative_g + h, -counter, npos.x, npos.y))

        self.last_iterations = iterations
        logger.debug(
            "No path %s -> %s (iterations=%d, budget=%d, passthrough=%s)",
            start, goal, iterations, self._max_iterations, allow_passthrough,
        )
        return None

    def next_step(
        self,
        mover: Movable,
        start: Vector2,
        goal: Vector2,
        allow_passthrough: bool = False,
    ) -> Vector2 | None:
        """Return the first step of the path, or None if there is nothing to do."""
        path = self.find_path(mover, start, goal, allow_passthrough)
        if path:
            return path[0]
        return None

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[Vector2]:
        """Walk back through came_from to build the path."""
        path: list[Vector2] = []
        while current in came_from:
            path.append(Vector2(current[0], current[1]))
            current = came_from[current]
        path.reverse()
        return path
