"""Replay serialization — records tick-by-tick character movement."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathmove.core.world_state import WorldState
    from pathmove.utils.event_log import SimEvent

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates tick records and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_ticks", "_seed", "_last_positions")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._ticks: list[dict[str, Any]] = []
        self._last_positions: dict[int, tuple[int, int]] = {}

    @property
    def ticks(self) -> list[dict[str, Any]]:
        return self._ticks

    def record_tick(self, tick: int, world: WorldState, events: list[SimEvent]) -> None:
        """Record characters whose cell changed this tick, plus the tick's events."""
        moved = []
        for c in world.characters():
            cell = (c.pos.x, c.pos.y)
            if self._last_positions.get(c.id) != cell:
                moved.append({"id": c.id, "kind": c.kind, "pos": list(cell)})
                self._last_positions[c.id] = cell

        if not moved and not events:
            return

        self._ticks.append(
            {
                "tick": tick,
                "moved": moved,
                "events": [
                    {"category": e.category, "message": e.message, "ids": list(e.character_ids)}
                    for e in events
                ],
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "recorded_ticks": len(self._ticks),
            "ticks": self._ticks,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d ticks)", self._path, len(self._ticks))
