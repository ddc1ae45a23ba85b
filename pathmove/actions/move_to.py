"""MoveTo — the scripting-layer command that sends a character somewhere.

The command resolves its subject and target against the world once, at issue
time. A target character's cell is read then and not tracked afterwards.
Argument validation lives here; the pathfinding core assumes a valid mover
and target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pathmove.core.models import Vector2

if TYPE_CHECKING:
    from pathmove.core.character import Character
    from pathmove.core.world_state import WorldState

logger = logging.getLogger(__name__)


class CommandError(ValueError):
    """A MoveTo command could not be resolved against the world."""


class UnknownCharacterError(CommandError):
    """The command named an event (or player) that is not on the map."""


class TargetOutOfBoundsError(CommandError):
    """Coordinate target lies outside the map."""


class SubjectType(str, Enum):
    this_event = "thisEvent"
    event = "event"
    player = "player"


class TargetType(str, Enum):
    coordinates = "coordinates"
    event = "event"
    player = "player"


@dataclass(frozen=True, slots=True)
class MoveToCommand:
    """Parsed MoveTo arguments. Ids and coordinates are only read when relevant."""

    subject: SubjectType = SubjectType.this_event
    subject_event_id: int = 1
    target_type: TargetType = TargetType.coordinates
    target_x: int = 0
    target_y: int = 0
    target_event_id: int = 1
    recalculate_if_blocked: bool = True

    def resolve_subject(self, world: WorldState, interpreter_event_id: int | None = None) -> Character:
        match self.subject:
            case SubjectType.player:
                if world.player is None:
                    raise UnknownCharacterError("No player on the map")
                return world.player
            case SubjectType.this_event:
                if interpreter_event_id is None:
                    raise CommandError("'thisEvent' subject needs a running event context")
                return _event(world, interpreter_event_id)
            case SubjectType.event:
                return _event(world, self.subject_event_id)
        raise CommandError(f"Unknown subject {self.subject!r}")

    def resolve_target(self, world: WorldState) -> Vector2:
        match self.target_type:
            case TargetType.coordinates:
                target = Vector2(self.target_x, self.target_y)
                if not world.in_bounds(target):
                    raise TargetOutOfBoundsError(f"Target {target} is outside the {world.grid.width}x{world.grid.height} map")
                return target
            case TargetType.event:
                return _event(world, self.target_event_id).pos
            case TargetType.player:
                if world.player is None:
                    raise UnknownCharacterError("No player on the map")
                return world.player.pos
        raise CommandError(f"Unknown target type {self.target_type!r}")

    def execute(self, world: WorldState, interpreter_event_id: int | None = None) -> tuple[Character, bool]:
        """Start pathfinding for the subject.

        Returns the resolved subject and whether a route was found.
        """
        character = self.resolve_subject(world, interpreter_event_id)
        target = self.resolve_target(world)
        started = character.start_pathfinding(target.x, target.y, self.recalculate_if_blocked)
        logger.info(
            "MoveTo: %s %d -> %s (%s)",
            character.kind, character.id, target, "route found" if started else "unreachable",
        )
        return character, started


def _event(world: WorldState, event_id: int) -> Character:
    event = world.events.get(event_id)
    if event is None:
        raise UnknownCharacterError(f"Event {event_id} does not exist")
    return event
