"""GET /api/v1/map — static grid data (fetch once)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pathmove.api.dependencies import get_engine_manager
from pathmove.api.engine_manager import EngineManager
from pathmove.api.schemas import MapResponse
from pathmove.core.enums import Direction
from pathmove.core.models import Vector2

router = APIRouter()


def rle_encode(values: list[int]) -> list[int]:
    """Run-length encode as [value, count, value, count, ...]."""
    rle: list[int] = []
    if not values:
        return rle
    cur_val = values[0]
    cur_count = 1
    for v in values[1:]:
        if v == cur_val:
            cur_count += 1
        else:
            rle.extend((cur_val, cur_count))
            cur_val = v
            cur_count = 1
    rle.extend((cur_val, cur_count))
    return rle


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    grid = manager.get_grid()
    if grid is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")

    tiles = [int(grid.get(Vector2(x, y))) for y in range(grid.height) for x in range(grid.width)]
    edges: dict[str, list[str]] = {}
    for y in range(grid.height):
        for x in range(grid.width):
            pos = Vector2(x, y)
            blocked = [d.name for d in Direction if grid.edge_blocked(pos, d)]
            if blocked:
                edges[f"{x},{y}"] = blocked

    return MapResponse(width=grid.width, height=grid.height, grid=rle_encode(tiles), edge_blocks=edges)
