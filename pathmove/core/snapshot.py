"""Immutable snapshot of the world state for API readers."""

from __future__ import annotations

from dataclasses import dataclass

from pathmove.core.character import Character
from pathmove.core.grid import Grid
from pathmove.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class CharacterView:
    """Read-only copy of one character and its pathfinding session."""

    id: int
    kind: str
    x: int
    y: int
    real_x: float
    real_y: float
    direction: str
    through: bool
    moving: bool
    session_state: str
    target: tuple[int, int] | None
    destination: tuple[int, int] | None
    remaining_path: tuple[tuple[int, int], ...]
    stuck_count: int
    forcing_through: bool
    last_outcome: str | None

    @classmethod
    def from_character(cls, c: Character) -> CharacterView:
        session = c.pathfinding
        real_x, real_y = c.real_pos
        return cls(
            id=c.id,
            kind=c.kind,
            x=c.pos.x,
            y=c.pos.y,
            real_x=real_x,
            real_y=real_y,
            direction=c.direction.name,
            through=c.through,
            moving=c.is_moving(),
            session_state=session.state.name if session else "IDLE",
            target=(session.target.x, session.target.y) if session and session.target else None,
            destination=(
                (session.destination.x, session.destination.y)
                if session and session.destination else None
            ),
            remaining_path=tuple((p.x, p.y) for p in session.remaining) if session else (),
            stuck_count=session.stuck_count if session else 0,
            forcing_through=session.forcing_through if session else False,
            last_outcome=session.outcome.name if session and session.outcome is not None else None,
        )


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the world, safe to hand to another thread.

    The grid is copied so later tile edits on the loop thread are not seen
    half-applied by readers.
    """

    tick: int
    seed: int
    grid: Grid
    characters: tuple[CharacterView, ...]

    @classmethod
    def from_world(cls, world: WorldState) -> Snapshot:
        return cls(
            tick=world.tick,
            seed=world.seed,
            grid=world.grid.copy(),
            characters=tuple(CharacterView.from_character(c) for c in world.characters()),
        )

    def character(self, char_id: int) -> CharacterView | None:
        for view in self.characters:
            if view.id == char_id:
                return view
        return None
