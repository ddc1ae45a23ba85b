"""EngineManager — singleton wrapper that runs the WorldLoop on a background thread.

The API reads from an atomically-swapped immutable Snapshot and hands MoveTo
commands to the loop through its CommandQueue; the WorldLoop mutates
WorldState exclusively on its own thread (Single-Writer preserved).
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from pathmove.actions.move_to import (
    CommandError,
    MoveToCommand,
    SubjectType,
    TargetOutOfBoundsError,
    TargetType,
    UnknownCharacterError,
)
from pathmove.core.models import Vector2
from pathmove.core.snapshot import Snapshot
from pathmove.engine.world_loop import WorldLoop
from pathmove.systems.generator import MapGenerator
from pathmove.systems.rng import DeterministicRNG
from pathmove.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from pathmove.config import SimulationConfig
    from pathmove.core.grid import Grid

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the simulation lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded buffer)
      - MoveTo submission (validated against the snapshot, queued for the loop)
      - control commands (start / pause / resume / step / reset)
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        self._tick_rate: float = 0.05  # seconds between ticks (20 tps default)

        self._loop: WorldLoop | None = None

        # Thread-safe shared state
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._event_log = EventLog()

        # Counters
        self._commands_accepted: int = 0
        self._commands_rejected: int = 0

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def commands_accepted(self) -> int:
        return self._commands_accepted

    @property
    def commands_rejected(self) -> int:
        return self._commands_rejected

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    def get_grid(self) -> Grid | None:
        snap = self.get_snapshot()
        return snap.grid if snap else None

    # -- commands --

    def submit_move_to(self, command: MoveToCommand) -> None:
        """Validate *command* against the latest snapshot and queue it.

        Raises CommandError (or a subclass) without queueing anything when
        the subject or target cannot be resolved.
        """
        try:
            self._validate(command)
        except CommandError:
            self._commands_rejected += 1
            raise
        assert self._loop is not None
        self._loop.submit(command)
        self._commands_accepted += 1

    def _validate(self, command: MoveToCommand) -> None:
        snapshot = self.get_snapshot()
        if snapshot is None:
            raise CommandError("Simulation not initialized yet")

        def require_event(event_id: int) -> None:
            view = snapshot.character(event_id)
            if view is None or view.kind != "event":
                raise UnknownCharacterError(f"Event {event_id} does not exist")

        match command.subject:
            case SubjectType.this_event:
                raise CommandError("'thisEvent' subject needs a running event context")
            case SubjectType.event:
                require_event(command.subject_event_id)

        match command.target_type:
            case TargetType.coordinates:
                target = Vector2(command.target_x, command.target_y)
                if not snapshot.grid.in_bounds(target):
                    raise TargetOutOfBoundsError(
                        f"Target {target} is outside the {snapshot.grid.width}x{snapshot.grid.height} map"
                    )
            case TargetType.event:
                require_event(command.target_event_id)

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="engine-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Execute exactly one tick.

        With the loop thread running the tick is requested from it (pausing
        first); otherwise it runs right here, as nothing else is writing.
        """
        if not self._running.is_set():
            assert self._loop is not None
            self._loop.tick_once()
            self._publish_snapshot_and_events()
            return
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop and rebuild the world from config, leaving the loop stopped."""
        self.stop()
        self._event_log.clear()
        self._commands_accepted = 0
        self._commands_rejected = 0
        self._build()
        logger.info("EngineManager reset.")

    # -- internals --

    def _build(self) -> None:
        """Construct all simulation components from config."""
        cfg = self.config
        rng = DeterministicRNG(cfg.world_seed)
        world = MapGenerator(cfg, rng).build_world()
        self._loop = WorldLoop(config=cfg, world=world)

        snap = self._loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        assert self._loop is not None

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            can_continue = self._loop.tick_once()
            self._publish_snapshot_and_events()
            if not can_continue:
                logger.info("Simulation ended at tick %d.", self._loop.world.tick)
                break

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot_and_events(self) -> None:
        """Swap snapshot + push the last tick's events."""
        assert self._loop is not None
        snap = self._loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

        events: list[SimEvent] = self._loop.tick_events
        if events:
            self._event_log.append_many(events)

    def _current_tick(self) -> int:
        if self._loop:
            return self._loop.world.tick
        return 0
