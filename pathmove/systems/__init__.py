"""Engine systems: RNG, occupancy indexing, world generation (``systems.generator``)."""

from pathmove.systems.rng import DeterministicRNG
from pathmove.systems.occupancy import OccupancyIndex

__all__ = ["DeterministicRNG", "OccupancyIndex"]
