"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass

# Declared range of the MaxIteration parameter.
MIN_ITERATION = 100
MAX_ITERATION = 10000


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for the simulation run."""

    # World
    world_seed: int = 42
    grid_width: int = 32
    grid_height: int = 24

    # Timing
    max_ticks: int = 5000
    step_ticks: int = 1                    # Ticks one grid step takes to animate

    # Pathfinding
    max_iteration: int = 500               # Node expansions allowed per A* search
    through_if_hard_blocked: bool = True   # Force a through-step when no route exists
    closest_point_radius: int = 5          # Ring radius searched for a substitute goal
    stuck_threshold: int = 3               # Blocked ticks before replanning

    # Map generation
    wall_density: float = 0.12
    num_walkers: int = 6                   # Randomly wandering events (dynamic obstacles)
    walker_move_chance: float = 0.25       # Per-tick chance an idle walker takes a step

    # Player
    player_x: int = 1
    player_y: int = 1

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"

    def __post_init__(self) -> None:
        # Frozen dataclass: clamp through object.__setattr__
        clamped = max(MIN_ITERATION, min(self.max_iteration, MAX_ITERATION))
        if clamped != self.max_iteration:
            object.__setattr__(self, "max_iteration", clamped)
        if self.step_ticks < 1:
            raise ValueError(f"step_ticks must be >= 1, got {self.step_ticks}")
        if self.stuck_threshold < 1:
            raise ValueError(f"stuck_threshold must be >= 1, got {self.stuck_threshold}")
        if self.closest_point_radius < 0:
            raise ValueError(f"closest_point_radius must be >= 0, got {self.closest_point_radius}")
        if self.grid_width <= 0 or self.grid_height <= 0:
            raise ValueError("grid dimensions must be positive")
