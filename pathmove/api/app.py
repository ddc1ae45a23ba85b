"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pathmove.api.engine_manager import EngineManager
from pathmove.api.routes import api_router
from pathmove.config import SimulationConfig
from pathmove.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    With *autostart* False the world is built but the loop thread is not
    started; ticks then only happen through ``POST /control/step`` or
    ``POST /control/start``.
    """
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        app.state.engine_manager = manager
        if autostart:
            manager.start()
            logger.info("API server started, simulation running.")
        yield
        manager.stop()
        app.state.engine_manager = None
        logger.info("API server shutting down.")

    app = FastAPI(
        title="pathmove",
        description=(
            "Grid pathfinding and movement engine — control and inspection API.\n\n"
            "## API Groups\n\n"
            "- **State** — Live characters, their pathfinding sessions, and the event feed\n"
            "- **Map** — Static grid data (fetch once at startup)\n"
            "- **Commands** — MoveTo: send the player or an event to a cell or another character\n"
            "- **Control** — Simulation lifecycle: start, pause, resume, step, reset\n"
            "- **Config** — Read-only simulation configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Characters with their session state, remaining path and recent pathfinding events."},
            {"name": "Map", "description": "Static grid data. Fetched once; tiles do not change during a run."},
            {"name": "Commands", "description": "Scripting-layer commands, validated against the latest snapshot and executed on the next tick."},
            {"name": "Control", "description": "Simulation lifecycle controls: start, pause, resume, single-step, and reset."},
            {"name": "Config", "description": "Read-only configuration: pathfinding budget, through policy, stuck threshold, map size."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
