"""Pathfinding: bounded A*, closest reachable point, per-character sessions."""

from pathmove.ai.pathfinding import Pathfinder
from pathmove.ai.nearest import ClosestPointFinder, manhattan_ring
from pathmove.ai.session import PathfindingSession

__all__ = ["ClosestPointFinder", "Pathfinder", "PathfindingSession", "manhattan_ring"]
