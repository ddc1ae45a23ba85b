"""WorldLoop — the tick scheduler that drives every character.

Tick cycle:
  1. Commands — drain queued MoveTo commands and start sessions
  2. Update — player first, then events by ascending id; each character
     advances its step animation and its pathfinding session
  3. Record — emit pathfinding events, record replay, advance tick

Characters see each other's moves from earlier in the same tick, so update
order can decide who gets through a one-tile gap first.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from pathmove.actions.move_to import CommandError
from pathmove.core.enums import SessionOutcome
from pathmove.core.snapshot import Snapshot
from pathmove.engine.command_queue import CommandQueue
from pathmove.utils.event_log import SimEvent

if TYPE_CHECKING:
    from pathmove.actions.move_to import MoveToCommand
    from pathmove.config import SimulationConfig
    from pathmove.core.character import Character
    from pathmove.core.world_state import WorldState
    from pathmove.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)


class WorldLoop:
    """The heartbeat of the simulation. Sole writer of WorldState."""

    __slots__ = ("_config", "_world", "_commands", "_recorder", "_tick_events")

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldState,
        recorder: ReplayRecorder | None = None,
        commands: CommandQueue | None = None,
    ) -> None:
        self._config = config
        self._world = world
        self._recorder = recorder
        self._commands = commands or CommandQueue()
        self._tick_events: list[SimEvent] = []

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def commands(self) -> CommandQueue:
        return self._commands

    @property
    def tick_events(self) -> list[SimEvent]:
        """Events emitted during the most recent tick."""
        return self._tick_events

    def submit(self, command: MoveToCommand, interpreter_event_id: int | None = None) -> None:
        """Queue a command for the start of the next tick."""
        self._commands.push(command, interpreter_event_id)

    def _emit(self, category: str, message: str,
              character_ids: tuple[int, ...] = (), metadata: dict | None = None) -> None:
        self._tick_events.append(SimEvent(
            tick=self._world.tick,
            category=category,
            message=message,
            character_ids=character_ids,
            metadata=metadata or {},
        ))

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False if the simulation should stop."""
        if self._world.tick >= self._config.max_ticks:
            logger.info("Tick %d: Max ticks reached.", self._world.tick)
            return False
        self._step()
        self._world.tick += 1
        return True

    def all_idle(self) -> bool:
        """True when no character has an active session or a step in flight."""
        return all(
            not c.is_moving() and (c.pathfinding is None or not c.pathfinding.active)
            for c in self._world.characters()
        )

    def create_snapshot(self) -> Snapshot:
        """Create an immutable snapshot of the current world state."""
        return Snapshot.from_world(self._world)

    def run(self, until_idle: bool = False) -> None:
        """Run until max_ticks, or (with *until_idle*) until every session has finished."""
        logger.info("=== Simulation started (seed=%d) ===", self._world.seed)

        while self.tick_once():
            if until_idle and self._commands.empty and self.all_idle():
                logger.info("Tick %d: all characters idle.", self._world.tick)
                break
            if self._world.tick % 50 == 0:
                active = sum(1 for c in self._world.characters() if c.pathfinding and c.pathfinding.active)
                logger.info("Tick %d: %d active pathfinding sessions", self._world.tick, active)

        logger.info("=== Simulation finished at tick %d ===", self._world.tick)
        if self._recorder:
            self._recorder.flush()

    def _step(self) -> None:
        self._tick_events = []
        tick = self._world.tick
        t0 = time.perf_counter()

        self._process_commands()

        characters = self._world.characters()
        for character in characters:
            self._update_character(character)

        logger.debug(
            "Tick %d: characters=%d events=%d total=%.4fs",
            tick, len(characters), len(self._tick_events), time.perf_counter() - t0,
        )

        if self._recorder:
            self._recorder.record_tick(tick, self._world, self._tick_events)

    def _process_commands(self) -> None:
        for queued in self._commands.drain():
            cmd = queued.command
            try:
                subject, started = cmd.execute(self._world, queued.interpreter_event_id)
            except CommandError as exc:
                logger.warning("Rejected MoveTo: %s", exc)
                self._emit("command", f"MoveTo rejected: {exc}")
                continue
            session = subject.pathfinding
            if started and session is not None:
                self._emit(
                    "command",
                    f"{subject.kind.capitalize()} {subject.id}: heading to {session.destination}",
                    character_ids=(subject.id,),
                    metadata={"target": _xy(session.target), "destination": _xy(session.destination)},
                )
            else:
                self._emit(
                    "command",
                    f"{subject.kind.capitalize()} {subject.id}: no reachable cell near target",
                    character_ids=(subject.id,),
                )

    def _update_character(self, character: Character) -> None:
        session = character.pathfinding
        if session is None:
            character.update()
            return

        was_active = session.active
        replans, forced = session.replans, session.forced_moves
        character.update()

        who = f"{character.kind.capitalize()} {character.id}"
        ids = (character.id,)
        if session.replans > replans:
            self._emit("pathfinding", f"{who}: blocked, rerouted at {character.pos}", ids)
        if session.forced_moves > forced:
            self._emit("pathfinding", f"{who}: hard blocked, forcing through to {character.pos}", ids)
        if was_active and not session.active and session.outcome == SessionOutcome.ARRIVED:
            self._emit("pathfinding", f"{who}: arrived at {character.pos}", ids,
                       metadata={"pos": _xy(character.pos)})


def _xy(pos) -> list[int] | None:
    return None if pos is None else [pos.x, pos.y]
