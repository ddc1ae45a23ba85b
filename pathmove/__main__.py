"""Entry point: ``python -m pathmove``.

Supports two modes:
  - ``python -m pathmove``        → Launch FastAPI server
  - ``python -m pathmove cli``    → Headless run: send a character somewhere and record a replay
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _add_world_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--width", type=int, default=32)
    parser.add_argument("--height", type=int, default=24)
    parser.add_argument("--walkers", type=int, default=6, help="Randomly wandering events")
    parser.add_argument("--max-iteration", type=int, default=500, help="A* node expansion budget (100-10000)")
    parser.add_argument("--no-through", action="store_true", help="Disable forced through-steps when hard blocked")
    parser.add_argument("--step-ticks", type=int, default=1, help="Ticks one grid step takes")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grid pathfinding and movement engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    _add_world_args(srv)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless MoveTo scenario")
    _add_world_args(cli)
    cli.add_argument("--ticks", type=int, default=500)
    cli.add_argument("--target", type=int, nargs=2, metavar=("X", "Y"), required=True)
    cli.add_argument("--subject-event", type=int, default=None,
                     help="Move this event instead of the player")
    cli.add_argument("--no-recalculate", action="store_true", help="Do not replan when blocked")
    cli.add_argument("--replay", type=str, default="replay.json")

    return parser


def _config_from_args(args: argparse.Namespace, **extra):
    from pathmove.config import SimulationConfig

    return SimulationConfig(
        world_seed=args.seed,
        grid_width=args.width,
        grid_height=args.height,
        num_walkers=args.walkers,
        max_iteration=args.max_iteration,
        through_if_hard_blocked=not args.no_through,
        step_ticks=args.step_ticks,
        log_level=args.log_level,
        **extra,
    )


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from pathmove.api.app import create_app

    config = _config_from_args(args)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> int:
    from pathmove.actions.move_to import CommandError, MoveToCommand, SubjectType, TargetType
    from pathmove.engine.world_loop import WorldLoop
    from pathmove.systems.generator import MapGenerator
    from pathmove.systems.rng import DeterministicRNG
    from pathmove.utils.logging import setup_logging
    from pathmove.utils.replay import ReplayRecorder

    config = _config_from_args(args, max_ticks=args.ticks, replay_file=args.replay)
    setup_logging(config.log_level)

    world = MapGenerator(config, DeterministicRNG(config.world_seed)).build_world()
    recorder = ReplayRecorder(config.replay_file, config.world_seed)
    loop = WorldLoop(config=config, world=world, recorder=recorder)

    if args.subject_event is None:
        subject = dict(subject=SubjectType.player)
    else:
        subject = dict(subject=SubjectType.event, subject_event_id=args.subject_event)
    command = MoveToCommand(
        target_type=TargetType.coordinates,
        target_x=args.target[0],
        target_y=args.target[1],
        recalculate_if_blocked=not args.no_recalculate,
        **subject,
    )

    try:
        mover = command.resolve_subject(world)
        command.resolve_target(world)
    except CommandError as exc:
        logger.error("Invalid MoveTo: %s", exc)
        return 2

    start = mover.pos
    loop.submit(command)
    loop.run(until_idle=True)

    session = mover.pathfinding
    outcome = session.outcome.name if session and session.outcome is not None else "NONE"
    logger.info(
        "%s %d: %s -> %s after %d ticks, %d moves (outcome=%s)",
        mover.kind, mover.id, start, mover.pos, world.tick, mover.moves_issued, outcome,
    )
    logger.info("Done. Replay written to %s", config.replay_file)
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None or args.command == "serve":
        if args.command is None:
            # Re-parse with serve defaults
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        raise SystemExit(_run_cli(args))


if __name__ == "__main__":
    main()
