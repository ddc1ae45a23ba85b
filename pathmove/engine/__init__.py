"""Engine layer: world loop and command queue."""

from pathmove.engine.command_queue import CommandQueue
from pathmove.engine.world_loop import WorldLoop

__all__ = ["CommandQueue", "WorldLoop"]
