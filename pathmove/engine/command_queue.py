"""Thread-safe command queue connecting the API to the WorldLoop."""

from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathmove.actions.move_to import MoveToCommand


@dataclass(frozen=True, slots=True)
class QueuedCommand:
    """A command plus the event whose script issued it, if any."""

    command: MoveToCommand
    interpreter_event_id: int | None = None


class CommandQueue:
    """MPSC (multiple-producer, single-consumer) queue for commands.

    API handlers push commands; the WorldLoop drains them at the start of
    each tick so characters are only ever mutated on the loop thread.
    """

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: queue.Queue[QueuedCommand] = queue.Queue()

    def push(self, command: MoveToCommand, interpreter_event_id: int | None = None) -> None:
        """Thread-safe enqueue."""
        self._queue.put_nowait(QueuedCommand(command, interpreter_event_id))

    def drain(self) -> list[QueuedCommand]:
        """Drain all pending commands (called by WorldLoop on the loop thread)."""
        commands: list[QueuedCommand] = []
        while True:
            try:
                commands.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return commands

    @property
    def empty(self) -> bool:
        return self._queue.empty()
