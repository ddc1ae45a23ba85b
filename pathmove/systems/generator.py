"""World generator — deterministic map layout and character placement."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pathmove.core.character import MapEvent, Player
from pathmove.core.enums import Domain, Material
from pathmove.core.grid import Grid
from pathmove.core.models import Vector2
from pathmove.core.world_state import WorldState

if TYPE_CHECKING:
    from pathmove.config import SimulationConfig
    from pathmove.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


class MapGenerator:
    """Builds a bordered map with scattered walls, a pond, the player and wandering events."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    def build_world(self) -> WorldState:
        cfg = self._config
        grid = self.build_grid()
        world = WorldState(seed=cfg.world_seed, grid=grid, config=cfg)

        player_pos = self._nearest_free(world, Vector2(cfg.player_x, cfg.player_y))
        world.add_character(Player(player_pos, step_ticks=cfg.step_ticks))

        for i in range(cfg.num_walkers):
            eid = world.allocate_event_id()
            x = self._rng.next_int(Domain.SPAWN, eid, i, 1, max(1, grid.width - 2))
            y = self._rng.next_int(Domain.SPAWN, eid, i + 1000, 1, max(1, grid.height - 2))
            pos = self._nearest_free(world, Vector2(x, y))
            world.add_character(MapEvent(
                eid, pos,
                step_ticks=cfg.step_ticks,
                rng=self._rng,
                move_chance=cfg.walker_move_chance,
            ))

        logger.info(
            "Generated %dx%d map (seed=%d) with %d wandering events",
            grid.width, grid.height, cfg.world_seed, len(world.events),
        )
        return world

    def build_grid(self) -> Grid:
        cfg = self._config
        grid = Grid(cfg.grid_width, cfg.grid_height)
        w, h = grid.width, grid.height

        # Border
        grid.fill(0, 0, w - 1, 0, Material.WALL)
        grid.fill(0, h - 1, w - 1, h - 1, Material.WALL)
        grid.fill(0, 0, 0, h - 1, Material.WALL)
        grid.fill(w - 1, 0, w - 1, h - 1, Material.WALL)

        # Scattered wall tiles and grass patches
        for y in range(1, h - 1):
            for x in range(1, w - 1):
                key = y * w + x
                roll = self._rng.next_float(Domain.MAP, key, 0)
                if roll < cfg.wall_density:
                    grid.set(Vector2(x, y), Material.WALL)
                elif roll < cfg.wall_density * 2:
                    grid.set(Vector2(x, y), Material.GRASS)

        # A small pond somewhere in the interior
        if w > 8 and h > 8:
            px = self._rng.next_int(Domain.MAP, 0, 1, 2, w - 6)
            py = self._rng.next_int(Domain.MAP, 0, 2, 2, h - 6)
            grid.fill(px, py, px + 2, py + 1, Material.WATER)
        return grid

    @staticmethod
    def _nearest_free(world: WorldState, pos: Vector2) -> Vector2:
        """Closest walkable, unoccupied cell to *pos* (scanning outward by Chebyshev ring)."""
        grid = world.grid
        limit = max(grid.width, grid.height)
        for r in range(limit):
            for dy in range(-r, r + 1):
                for dx in range(-r, r + 1):
                    if max(abs(dx), abs(dy)) != r:
                        continue
                    p = Vector2(pos.x + dx, pos.y + dy)
                    if grid.is_walkable(p) and not world.occupancy.at(p):
                        return p
        raise ValueError("Map has no free walkable cell")
