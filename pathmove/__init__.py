"""Grid pathfinding and tick-driven character movement."""

__version__ = "0.1.0"
