"""Scripting-layer commands."""

from pathmove.actions.move_to import (
    CommandError,
    MoveToCommand,
    SubjectType,
    TargetOutOfBoundsError,
    TargetType,
    UnknownCharacterError,
)

__all__ = [
    "CommandError",
    "MoveToCommand",
    "SubjectType",
    "TargetOutOfBoundsError",
    "TargetType",
    "UnknownCharacterError",
]
