"""FastAPI dependency injection — provides the app's EngineManager."""

from __future__ import annotations

from fastapi import HTTPException, Request

from pathmove.api.engine_manager import EngineManager


def get_engine_manager(request: Request) -> EngineManager:
    """The manager created by the app's lifespan (one per app instance)."""
    manager: EngineManager | None = getattr(request.app.state, "engine_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="Engine not initialized; server not started correctly.")
    return manager
