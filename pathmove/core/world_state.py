"""Mutable authoritative world state, only mutated by the WorldLoop."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pathmove.ai.nearest import ClosestPointFinder
from pathmove.ai.pathfinding import Pathfinder
from pathmove.ai.session import PathfindingSession
from pathmove.config import SimulationConfig
from pathmove.core.character import Character, MapEvent, Player
from pathmove.core.enums import Direction
from pathmove.core.grid import Grid, GridQuery
from pathmove.core.models import Vector2
from pathmove.systems.occupancy import OccupancyIndex

if TYPE_CHECKING:
    from pathmove.core.character import Movable


class WorldState(GridQuery):
    """The single source of truth for the simulation.

    Answers passability for every character it hosts: terrain comes from
    the grid, dynamic blocking from the occupancy index.
    """

    __slots__ = (
        "tick", "seed", "config", "grid", "events", "player",
        "occupancy", "pathfinder", "closest_finder", "_next_event_id",
    )

    def __init__(
        self,
        seed: int,
        grid: Grid,
        config: SimulationConfig | None = None,
        occupancy: OccupancyIndex | None = None,
    ) -> None:
        self.tick: int = 0
        self.seed: int = seed
        self.config: SimulationConfig = config or SimulationConfig()
        self.grid: Grid = grid
        self.events: dict[int, MapEvent] = {}
        self.player: Player | None = None
        self.occupancy: OccupancyIndex = occupancy or OccupancyIndex()
        self.pathfinder = Pathfinder(self, max_iterations=self.config.max_iteration)
        self.closest_finder = ClosestPointFinder(self.pathfinder, max_radius=self.config.closest_point_radius)
        self._next_event_id: int = 1

    # -- characters --

    def allocate_event_id(self) -> int:
        eid = self._next_event_id
        self._next_event_id += 1
        return eid

    def add_character(self, character: Character) -> Character:
        session = PathfindingSession(
            character,
            self.pathfinder,
            self.closest_finder,
            through_if_hard_blocked=self.config.through_if_hard_blocked,
            stuck_threshold=self.config.stuck_threshold,
        )
        character.attach(self, session)
        if isinstance(character, Player):
            if self.player is not None:
                self.occupancy.remove(self.player.id, self.player.pos)
            self.player = character
        elif isinstance(character, MapEvent):
            self.events[character.id] = character
            self._next_event_id = max(self._next_event_id, character.id + 1)
        self.occupancy.insert(character.id, character.pos)
        return character

    def remove_event(self, event_id: int) -> MapEvent | None:
        event = self.events.pop(event_id, None)
        if event is not None:
            self.occupancy.remove(event_id, event.pos)
        return event

    def character(self, char_id: int) -> Character | None:
        if self.player is not None and char_id == self.player.id:
            return self.player
        return self.events.get(char_id)

    def characters(self) -> list[Character]:
        """Player first, then events by ascending id (the update order)."""
        ordered: list[Character] = [] if self.player is None else [self.player]
        ordered.extend(self.events[eid] for eid in sorted(self.events))
        return ordered

    def character_moved(self, character: Character, old_pos: Vector2) -> None:
        self.occupancy.move(character.id, old_pos, character.pos)

    def characters_at(self, pos: Vector2) -> list[Character]:
        found = []
        for cid in self.occupancy.at(pos):
            c = self.character(cid)
            if c is not None:
                found.append(c)
        return found

    # -- GridQuery --

    def in_bounds(self, pos: Vector2) -> bool:
        return self.grid.in_bounds(pos)

    def is_map_passable(self, pos: Vector2, direction: Direction) -> bool:
        return self.grid.is_passable(pos, direction)

    def is_occupant_passable(self, mover: Movable, pos: Vector2, direction: Direction) -> bool:
        if mover.through:
            return True
        dest = pos.step(direction)
        for other in self.characters_at(dest):
            if other is mover or other.through or not other.solid:
                continue
            return False
        return True
