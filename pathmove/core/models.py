"""Core value types: Vector2 and direction offsets."""

from __future__ import annotations

from dataclasses import dataclass

from pathmove.core.enums import Direction


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer grid coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def step(self, direction: Direction) -> Vector2:
        """Return the neighbouring cell one step toward *direction*."""
        return self + DIRECTION_OFFSETS[direction]

    def direction_to(self, other: Vector2) -> Direction | None:
        """Cardinal direction that reduces the distance to *other* the most.

        The longer axis wins; horizontal wins ties. Returns None when the
        two cells coincide.
        """
        dx = other.x - self.x
        dy = other.y - self.y
        if dx == 0 and dy == 0:
            return None
        if abs(dx) >= abs(dy):
            return Direction.RIGHT if dx > 0 else Direction.LEFT
        return Direction.DOWN if dy > 0 else Direction.UP

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


DIRECTION_OFFSETS: dict[Direction, Vector2] = {
    Direction.UP: Vector2(0, -1),
    Direction.RIGHT: Vector2(1, 0),
    Direction.DOWN: Vector2(0, 1),
    Direction.LEFT: Vector2(-1, 0),
}
