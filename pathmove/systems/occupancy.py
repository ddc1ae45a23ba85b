"""Cell occupancy index for O(1) "who stands here" lookups."""

from __future__ import annotations

from collections import defaultdict

from pathmove.core.models import Vector2


class OccupancyIndex:
    """Maps exact grid cells to the set of character IDs standing on them."""

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        self._cells: dict[tuple[int, int], set[int]] = defaultdict(set)

    def insert(self, char_id: int, pos: Vector2) -> None:
        self._cells[(pos.x, pos.y)].add(char_id)

    def remove(self, char_id: int, pos: Vector2) -> None:
        key = (pos.x, pos.y)
        bucket = self._cells.get(key)
        if bucket is not None:
            bucket.discard(char_id)
            if not bucket:
                del self._cells[key]

    def move(self, char_id: int, old_pos: Vector2, new_pos: Vector2) -> None:
        if old_pos != new_pos:
            self.remove(char_id, old_pos)
            self.insert(char_id, new_pos)

    def at(self, pos: Vector2) -> set[int]:
        """Return character IDs on *pos* (a copy)."""
        return set(self._cells.get((pos.x, pos.y), ()))
