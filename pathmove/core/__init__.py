"""Core data models and world representation."""

from pathmove.core.enums import Direction, Domain, Material, SessionOutcome, SessionState
from pathmove.core.models import DIRECTION_OFFSETS, Vector2
from pathmove.core.grid import Grid, GridQuery
from pathmove.core.character import Character, MapEvent, Movable, Player

__all__ = [
    "Character",
    "DIRECTION_OFFSETS",
    "Direction",
    "Domain",
    "Grid",
    "GridQuery",
    "MapEvent",
    "Material",
    "Movable",
    "Player",
    "SessionOutcome",
    "SessionState",
    "Vector2",
]
