"""Grid / map system and the passability query interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pathmove.core.enums import WALKABLE_MATERIALS, Direction, Material
from pathmove.core.models import Vector2

if TYPE_CHECKING:
    from pathmove.core.character import Movable


class GridQuery(ABC):
    """Passability questions the pathfinding core asks of the host map.

    Answers are never cached by callers: the world may change between ticks.
    """

    @abstractmethod
    def in_bounds(self, pos: Vector2) -> bool: ...

    @abstractmethod
    def is_map_passable(self, pos: Vector2, direction: Direction) -> bool:
        """Static terrain: may anything step from *pos* toward *direction*?"""

    @abstractmethod
    def is_occupant_passable(self, mover: Movable, pos: Vector2, direction: Direction) -> bool:
        """Dynamic: is the step free of characters that block *mover*?"""


class Grid:
    """2D tile grid backed by a flat list, with per-tile directional edge blocks."""

    __slots__ = ("width", "height", "_tiles", "_edge_blocks")

    def __init__(self, width: int, height: int, default: Material = Material.FLOOR) -> None:
        self.width = width
        self.height = height
        self._tiles: list[Material] = [default] * (width * height)
        # (x, y) -> directions in which the tile cannot be crossed
        self._edge_blocks: dict[tuple[int, int], frozenset[Direction]] = {}

    # -- access --

    def _idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def get(self, pos: Vector2) -> Material:
        if not self.in_bounds(pos):
            return Material.WALL
        return self._tiles[self._idx(pos.x, pos.y)]

    def set(self, pos: Vector2, material: Material) -> None:
        if self.in_bounds(pos):
            self._tiles[self._idx(pos.x, pos.y)] = material

    def is_walkable(self, pos: Vector2) -> bool:
        return self.get(pos) in WALKABLE_MATERIALS

    def fill(self, x0: int, y0: int, x1: int, y1: int, material: Material) -> None:
        """Set every tile in the inclusive rectangle (x0, y0)-(x1, y1)."""
        for y in range(min(y0, y1), max(y0, y1) + 1):
            for x in range(min(x0, x1), max(x0, x1) + 1):
                self.set(Vector2(x, y), material)

    # -- directional edges --

    def block_edge(self, pos: Vector2, *directions: Direction) -> None:
        """Forbid crossing the border of *pos* on the given sides."""
        key = (pos.x, pos.y)
        self._edge_blocks[key] = self._edge_blocks.get(key, frozenset()) | frozenset(directions)

    def unblock_edge(self, pos: Vector2, *directions: Direction) -> None:
        key = (pos.x, pos.y)
        remaining = self._edge_blocks.get(key, frozenset()) - frozenset(directions)
        if remaining:
            self._edge_blocks[key] = remaining
        else:
            self._edge_blocks.pop(key, None)

    def edge_blocked(self, pos: Vector2, direction: Direction) -> bool:
        blocked = self._edge_blocks.get((pos.x, pos.y))
        return blocked is not None and direction in blocked

    def is_passable(self, pos: Vector2, direction: Direction) -> bool:
        """Can a step leave *pos* toward *direction* and enter the neighbour?

        Both tiles must be in bounds and the destination walkable; the source
        must not block its exit side and the destination must not block its
        entry side.
        """
        dest = pos.step(direction)
        if not (self.in_bounds(pos) and self.in_bounds(dest)):
            return False
        if not self.is_walkable(dest):
            return False
        if self.edge_blocked(pos, direction):
            return False
        return not self.edge_blocked(dest, direction.reverse())

    # -- copy --

    def copy(self) -> Grid:
        new = Grid.__new__(Grid)
        new.width = self.width
        new.height = self.height
        new._tiles = list(self._tiles)
        new._edge_blocks = dict(self._edge_blocks)
        return new
