"""POST /api/v1/commands/move-to — the MoveTo scripting command."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pathmove.actions.move_to import CommandError, UnknownCharacterError
from pathmove.api.dependencies import get_engine_manager
from pathmove.api.engine_manager import EngineManager
from pathmove.api.schemas import CommandResponse, MoveToRequest

router = APIRouter()


@router.post("/commands/move-to", response_model=CommandResponse, status_code=202)
def move_to(
    request: MoveToRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    try:
        manager.submit_move_to(request.to_command())
    except UnknownCharacterError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except CommandError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    snapshot = manager.get_snapshot()
    tick = snapshot.tick if snapshot else 0
    return CommandResponse(status="queued", message="MoveTo queued for the next tick.", tick=tick)
