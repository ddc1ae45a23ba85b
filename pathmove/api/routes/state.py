"""GET /api/v1/state — characters, sessions and events (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from pathmove.api.dependencies import get_engine_manager
from pathmove.api.engine_manager import EngineManager
from pathmove.api.schemas import CharacterSchema, EventSchema, SimulationStats, WorldStateResponse
from pathmove.core.snapshot import CharacterView

router = APIRouter()


def _serialize_character(c: CharacterView) -> CharacterSchema:
    return CharacterSchema(
        id=c.id,
        kind=c.kind,
        x=c.x,
        y=c.y,
        real_x=c.real_x,
        real_y=c.real_y,
        direction=c.direction,
        through=c.through,
        moving=c.moving,
        session_state=c.session_state,
        target=list(c.target) if c.target else None,
        destination=list(c.destination) if c.destination else None,
        remaining_path=[list(p) for p in c.remaining_path],
        stuck_count=c.stuck_count,
        forcing_through=c.forcing_through,
        last_outcome=c.last_outcome,
    )


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")

    events = [
        EventSchema(tick=ev.tick, category=ev.category, message=ev.message,
                    character_ids=list(ev.character_ids))
        for ev in manager.event_log.since_tick(since_tick)
    ]
    return WorldStateResponse(
        tick=snapshot.tick,
        characters=[_serialize_character(c) for c in snapshot.characters],
        events=events,
    )


@router.get("/state/characters/{char_id}", response_model=CharacterSchema)
def get_character(
    char_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> CharacterSchema:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")
    view = snapshot.character(char_id)
    if view is None:
        raise HTTPException(status_code=404, detail=f"Character {char_id} not found.")
    return _serialize_character(view)


@router.get("/stats", response_model=SimulationStats)
def get_stats(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationStats:
    snapshot = manager.get_snapshot()
    characters = snapshot.characters if snapshot else ()
    return SimulationStats(
        tick=snapshot.tick if snapshot else 0,
        character_count=len(characters),
        active_sessions=sum(1 for c in characters if c.session_state != "IDLE"),
        commands_accepted=manager.commands_accepted,
        commands_rejected=manager.commands_rejected,
        running=manager.running,
        paused=manager.paused,
    )
