"""PathArena — E2E test fixture for pathfinding and movement.

Creates a small hand-built world with a real WorldLoop, lets a test place
walls and characters, start MoveTo sessions, run ticks, and inspect where
everyone ended up.

Usage:
    arena = PathArena(10, 10)
    player = arena.add_player((0, 0))
    arena.wall(3, 0)
    arena.move_to(player, 5, 7)
    arena.run_until_idle()
    assert player.pos == Vector2(5, 7)
"""

from __future__ import annotations

import os
import sys
from collections import deque

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from pathmove.actions.move_to import MoveToCommand
from pathmove.config import SimulationConfig
from pathmove.core.character import Character, MapEvent, Player
from pathmove.core.enums import Direction, Material
from pathmove.core.grid import Grid
from pathmove.core.models import Vector2
from pathmove.core.world_state import WorldState
from pathmove.engine.world_loop import WorldLoop
from pathmove.systems.rng import DeterministicRNG
from pathmove.utils.event_log import SimEvent


class PathArena:
    """A bare world with no generator: every tile and character is placed by the test."""

    def __init__(
        self,
        width: int = 10,
        height: int = 10,
        seed: int = 42,
        recorder=None,
        **config_overrides,
    ):
        defaults = dict(
            max_ticks=9999,
            grid_width=width,
            grid_height=height,
            num_walkers=0,
        )
        defaults.update(config_overrides)
        self.config = SimulationConfig(**defaults)
        self.rng = DeterministicRNG(seed=seed)

        self.world = WorldState(seed=seed, grid=Grid(width, height), config=self.config)
        self.loop = WorldLoop(self.config, self.world, recorder=recorder)
        self._all_events: list[SimEvent] = []

    # -- Grid manipulation --

    def wall(self, x: int, y: int) -> None:
        self.world.grid.set(Vector2(x, y), Material.WALL)

    def walls(self, cells) -> None:
        for x, y in cells:
            self.wall(x, y)

    def block_edge(self, x: int, y: int, *directions: Direction) -> None:
        self.world.grid.block_edge(Vector2(x, y), *directions)

    # -- Character builders --

    def add_player(self, pos: tuple[int, int] = (0, 0), *, step_ticks: int | None = None) -> Player:
        player = Player(Vector2(*pos), step_ticks=step_ticks or self.config.step_ticks)
        self.world.add_character(player)
        return player

    def add_event(
        self,
        pos: tuple[int, int],
        *,
        eid: int | None = None,
        solid: bool = True,
        through: bool = False,
        step_ticks: int | None = None,
        move_chance: float = 0.0,
    ) -> MapEvent:
        """Add a map event. It only wanders when *move_chance* is positive."""
        event = MapEvent(
            eid if eid is not None else self.world.allocate_event_id(),
            Vector2(*pos),
            solid=solid,
            through=through,
            step_ticks=step_ticks or self.config.step_ticks,
            rng=self.rng if move_chance > 0 else None,
            move_chance=move_chance,
        )
        self.world.add_character(event)
        return event

    # -- Commands --

    def move_to(self, character: Character, x: int, y: int, recalculate_if_blocked: bool = True) -> bool:
        """Start a session right away, outside the tick cycle."""
        return character.start_pathfinding(x, y, recalculate_if_blocked)

    def submit(self, command: MoveToCommand, interpreter_event_id: int | None = None) -> None:
        """Queue a command for the next tick, as the API does."""
        self.loop.submit(command, interpreter_event_id)

    # -- Running --

    def tick(self, n: int = 1) -> list[SimEvent]:
        """Run *n* ticks and return the events they emitted."""
        events: list[SimEvent] = []
        for _ in range(n):
            self.loop.tick_once()
            events.extend(self.loop.tick_events)
        self._all_events.extend(events)
        return events

    def run_until_idle(self, limit: int = 500) -> int:
        """Tick until every session is done. Returns the number of ticks run."""
        for n in range(1, limit + 1):
            self.tick()
            if self.loop.commands.empty and self.loop.all_idle():
                return n
        raise AssertionError(f"Characters still busy after {limit} ticks")

    def trace(self, character: Character, ticks: int) -> list[Vector2]:
        """Position of *character* after each of the next *ticks* ticks."""
        positions = []
        for _ in range(ticks):
            self.tick()
            positions.append(character.pos)
        return positions

    @property
    def all_events(self) -> list[SimEvent]:
        return self._all_events

    def events_of(self, category: str) -> list[SimEvent]:
        return [e for e in self._all_events if e.category == category]

    # -- Reference search --

    def bfs_distance(self, start: tuple[int, int], goal: tuple[int, int]) -> int | None:
        """Unbounded breadth-first step count over terrain alone."""
        s, g = Vector2(*start), Vector2(*goal)
        seen = {s}
        frontier = deque([(s, 0)])
        while frontier:
            cur, dist = frontier.popleft()
            if cur == g:
                return dist
            for d in Direction:
                nxt = cur.step(d)
                if nxt in seen or not self.world.is_map_passable(cur, d):
                    continue
                seen.add(nxt)
                frontier.append((nxt, dist + 1))
        return None
