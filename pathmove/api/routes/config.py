"""GET /api/v1/config — expose simulation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from pathmove.api.dependencies import get_engine_manager
from pathmove.api.engine_manager import EngineManager
from pathmove.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        max_ticks=cfg.max_ticks,
        step_ticks=cfg.step_ticks,
        max_iteration=cfg.max_iteration,
        through_if_hard_blocked=cfg.through_if_hard_blocked,
        closest_point_radius=cfg.closest_point_radius,
        stuck_threshold=cfg.stuck_threshold,
        num_walkers=cfg.num_walkers,
        tick_rate=manager.tick_rate,
    )
