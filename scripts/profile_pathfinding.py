#!/usr/bin/env python3
"""Pathfinding profiler.

Usage:
    python scripts/profile_pathfinding.py --searches 500 --seed 42
    python scripts/profile_pathfinding.py --grid 96 --max-iteration 2000 --cprofile astar.prof
    python scripts/profile_pathfinding.py --ticks 1000 --memory

Reports:
    - A* search timing (min, p50, p95, p99, max) over random start/goal pairs
    - Iterations used per search and how often the budget ran out
    - Per-tick timing of a run where every character keeps receiving MoveTo commands
    - Optional: cProfile dump for flame graph generation
    - Optional: tracemalloc memory snapshot
"""

from __future__ import annotations

import argparse
import cProfile
import io
import os
import pstats
import statistics
import sys
import time
import tracemalloc

# Ensure project root is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pathmove.actions.move_to import MoveToCommand, SubjectType
from pathmove.config import SimulationConfig
from pathmove.core.enums import Domain
from pathmove.core.models import Vector2
from pathmove.engine.world_loop import WorldLoop
from pathmove.systems.generator import MapGenerator
from pathmove.systems.rng import DeterministicRNG


def _random_cell(rng: DeterministicRNG, cfg: SimulationConfig, key: int, counter: int) -> Vector2:
    x = rng.next_int(Domain.SPAWN, key, counter, 1, cfg.grid_width - 2)
    y = rng.next_int(Domain.SPAWN, key, counter + 1, 1, cfg.grid_height - 2)
    return Vector2(x, y)


def _profile_searches(cfg: SimulationConfig, count: int) -> dict:
    """Time raw A* searches between random cells for the player."""
    rng = DeterministicRNG(cfg.world_seed)
    world = MapGenerator(cfg, rng).build_world()
    player = world.player
    assert player is not None
    pf = world.pathfinder

    times: list[float] = []
    iterations: list[int] = []
    found = 0
    exhausted = 0

    for i in range(count):
        start = _random_cell(rng, cfg, 10_000 + i, 0)
        goal = _random_cell(rng, cfg, 20_000 + i, 0)
        t0 = time.perf_counter()
        path = pf.find_path(player, start, goal)
        times.append(time.perf_counter() - t0)
        iterations.append(pf.last_iterations)
        if path is not None:
            found += 1
        elif pf.last_iterations >= pf.max_iterations:
            exhausted += 1

    return {"times": times, "iterations": iterations, "found": found, "exhausted": exhausted}


def _profile_ticks(cfg: SimulationConfig, num_ticks: int) -> dict:
    """Run the loop, re-sending every idle character somewhere new."""
    rng = DeterministicRNG(cfg.world_seed)
    world = MapGenerator(cfg, rng).build_world()
    loop = WorldLoop(cfg, world)

    tick_times: list[float] = []
    active_counts: list[int] = []
    issued = 0

    for i in range(num_ticks):
        for c in world.characters():
            if c.pathfinding is not None and not c.pathfinding.active:
                dest = _random_cell(rng, cfg, 30_000 + c.id, i)
                if c.kind == "player":
                    cmd = MoveToCommand(subject=SubjectType.player, target_x=dest.x, target_y=dest.y)
                else:
                    cmd = MoveToCommand(subject=SubjectType.event, subject_event_id=c.id,
                                        target_x=dest.x, target_y=dest.y)
                loop.submit(cmd)
                issued += 1

        t0 = time.perf_counter()
        if not loop.tick_once():
            break
        tick_times.append(time.perf_counter() - t0)
        active_counts.append(sum(1 for c in world.characters() if c.pathfinding and c.pathfinding.active))

    return {"tick_times": tick_times, "active_counts": active_counts, "issued": issued}


def _percentile(data: list[float], p: float) -> float:
    """Simple percentile calculation."""
    if not data:
        return 0.0
    sorted_data = sorted(data)
    k = (len(sorted_data) - 1) * (p / 100.0)
    f = int(k)
    c = f + 1
    if c >= len(sorted_data):
        return sorted_data[f]
    return sorted_data[f] + (k - f) * (sorted_data[c] - sorted_data[f])


def _print_distribution(label: str, values: list[float]) -> None:
    print(f"\n  {label:<16} {'Time (ms)':>10}")
    print(f"  {'-' * 16} {'-' * 10}")
    print(f"  {'Min':<16} {min(values) * 1000:>10.3f}")
    print(f"  {'P50 (median)':<16} {_percentile(values, 50) * 1000:>10.3f}")
    print(f"  {'P95':<16} {_percentile(values, 95) * 1000:>10.3f}")
    print(f"  {'P99':<16} {_percentile(values, 99) * 1000:>10.3f}")
    print(f"  {'Max':<16} {max(values) * 1000:>10.3f}")


def _print_report(search: dict, ticks: dict, cfg: SimulationConfig) -> None:
    print("\n" + "=" * 70)
    print("  PATHFINDING PERFORMANCE REPORT")
    print("=" * 70)

    times = search["times"]
    if times:
        n = len(times)
        print(f"\n  Searches:          {n}")
        print(f"  Paths found:       {search['found']} ({search['found'] / n * 100:.1f}%)")
        print(f"  Budget exhausted:  {search['exhausted']} (budget={cfg.max_iteration})")
        print(f"  Avg iterations:    {statistics.mean(search['iterations']):.1f}")
        print(f"  Max iterations:    {max(search['iterations'])}")
        _print_distribution("Search", times)

    tick_times = ticks["tick_times"]
    if tick_times:
        print(f"\n  Ticks executed:    {len(tick_times)}")
        print(f"  MoveTo issued:     {ticks['issued']}")
        print(f"  Throughput:        {len(tick_times) / sum(tick_times):.1f} ticks/sec")
        print(f"  Active sessions (avg): {statistics.mean(ticks['active_counts']):.1f}")
        _print_distribution("Tick", tick_times)

        print(f"\n  Top 5 slowest ticks:")
        indexed = sorted(enumerate(tick_times), key=lambda x: x[1], reverse=True)[:5]
        for tick_idx, t in indexed:
            print(f"    Tick {tick_idx:>5}: {t * 1000:.3f}ms  ({ticks['active_counts'][tick_idx]} active)")

    print("\n" + "=" * 70)


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile A* and session updates")
    parser.add_argument("--searches", type=int, default=500, help="Random A* searches to time")
    parser.add_argument("--ticks", type=int, default=500, help="Ticks to run with constant MoveTo traffic")
    parser.add_argument("--seed", type=int, default=42, help="World seed")
    parser.add_argument("--grid", type=int, default=64, help="Grid size (NxN)")
    parser.add_argument("--walkers", type=int, default=20, help="Event count")
    parser.add_argument("--max-iteration", type=int, default=500, help="A* node expansion budget")
    parser.add_argument("--cprofile", type=str, default=None, help="Save cProfile output to file")
    parser.add_argument("--memory", action="store_true", help="Enable tracemalloc memory profiling")
    args = parser.parse_args()

    cfg = SimulationConfig(
        world_seed=args.seed,
        max_ticks=args.ticks + 10,
        grid_width=args.grid,
        grid_height=args.grid,
        num_walkers=args.walkers,
        max_iteration=args.max_iteration,
    )

    print(f"Profiling: {args.searches} searches, {args.ticks} ticks, seed={args.seed}, "
          f"grid={args.grid}x{args.grid}, walkers={args.walkers}, budget={cfg.max_iteration}")

    if args.memory:
        tracemalloc.start()

    profiler = None
    if args.cprofile:
        profiler = cProfile.Profile()
        profiler.enable()

    search = _profile_searches(cfg, args.searches)
    ticks = _profile_ticks(cfg, args.ticks)

    if profiler:
        profiler.disable()

    _print_report(search, ticks, cfg)

    if profiler and args.cprofile:
        profiler.dump_stats(args.cprofile)
        print(f"\n  cProfile data saved to: {args.cprofile}")
        print(f"  View with: python -m pstats {args.cprofile}")

        print(f"\n  Top 20 functions by cumulative time:")
        stream = io.StringIO()
        ps = pstats.Stats(profiler, stream=stream)
        ps.sort_stats("cumulative")
        ps.print_stats(20)
        print(stream.getvalue())

    if args.memory:
        snapshot = tracemalloc.take_snapshot()
        print("\n  Top 15 memory allocations by size:")
        print(f"  {'File:Line':<60} {'Size':>10}")
        print(f"  {'-' * 60} {'-' * 10}")
        for stat in snapshot.statistics("lineno")[:15]:
            print(f"  {str(stat.traceback):<60} {stat.size / 1024:>8.1f} KB")

        current, peak = tracemalloc.get_traced_memory()
        print(f"\n  Current memory: {current / 1024:.1f} KB")
        print(f"  Peak memory:    {peak / 1024:.1f} KB")
        tracemalloc.stop()


if __name__ == "__main__":
    main()
