"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Material(IntEnum):
    """Tile materials. Only FLOOR and GRASS are walkable."""

    FLOOR = 0
    WALL = 1
    WATER = 2
    GRASS = 3


WALKABLE_MATERIALS: frozenset[Material] = frozenset({Material.FLOOR, Material.GRASS})


@unique
class Direction(IntEnum):
    """Cardinal movement directions, in neighbour-expansion order."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def reverse(self) -> Direction:
        return Direction((self.value + 2) % 4)


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    MAP = 0
    SPAWN = 1
    WANDER = 2


@unique
class SessionState(IntEnum):
    """Pathfinding session states. IDLE is the only terminal state."""

    IDLE = 0
    PLANNING = 1
    FOLLOWING = 2
    STUCK = 3
    REPLANNING = 4
    FORCING_THROUGH = 5


@unique
class SessionOutcome(IntEnum):
    """Why the last session returned to IDLE."""

    ARRIVED = 0
    UNREACHABLE = 1
    SUPERSEDED = 2
