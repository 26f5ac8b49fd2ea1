"""Command line tools for inspecting levels and running headless games."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from level_snake.config import EngineConfig
from level_snake.engine import GameEngine
from level_snake.errors import OutOfRange
from level_snake.levels import LevelDefinition, get_level, list_level_indices
from level_snake.snake import Direction

logger = logging.getLogger(__name__)

_MOVE_MAP: dict[str, Direction | None] = {
    "u": Direction.UP,
    "l": Direction.LEFT,
    "d": Direction.DOWN,
    "r": Direction.RIGHT,
    ".": None,
}


def _moves(value: str) -> str:
    moves = value.lower()
    unknown = sorted(set(moves) - set(_MOVE_MAP))
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown move(s) {''.join(unknown)!r}; use u, l, d, r or '.'."
        )
    return moves


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must be >= 0.")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="level-snake",
        description="Level Snake level catalog and headless game runner.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- levels ---
    sub.add_parser("levels", help="List the levels in the catalog.")

    # --- run ---
    run_p = sub.add_parser("run", help="Play a scripted game without a UI.")
    source = run_p.add_mutually_exclusive_group()
    source.add_argument("--level", type=int, default=0)
    source.add_argument(
        "--random", action="store_true",
        help="Use a random 10x10 level instead of a catalog level.",
    )
    run_p.add_argument(
        "--moves", type=_moves, default="",
        help="One character per tick: u, l, d, r to turn, '.' to keep going.",
    )
    run_p.add_argument(
        "--max-ticks", type=_non_negative, default=None,
        help="Total ticks to run (defaults to the number of moves).",
    )
    run_p.add_argument("--seed", type=int, default=None)
    run_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON engine config file.",
    )
    run_p.add_argument(
        "--save-config", type=str, default=None,
        help="Write the effective engine config to this JSON file.",
    )

    return parser


def _run_levels(args: argparse.Namespace) -> int:
    for index in list_level_indices():
        level = get_level(index)
        goal = level.goal if level.goal is not None else "-"
        print(  # noqa: T201
            f"{index}: {level.rows}x{level.cols} "
            f"obstacles={len(level.obstacles)} goal={goal} "
            f"respawn={'yes' if level.respawn_food else 'no'}"
        )
    return 0


def _run_game(args: argparse.Namespace) -> int:
    config = EngineConfig.load(args.config) if args.config else EngineConfig()
    if args.seed is not None:
        config = EngineConfig(**{**config.to_dict(), "seed": args.seed})
    if args.save_config:
        config.save(args.save_config)

    try:
        level = LevelDefinition() if args.random else get_level(args.level)
    except OutOfRange as exc:
        logger.error("%s", exc)
        return 2

    engine = GameEngine(level, config=config)
    engine.finish_countdown()

    max_ticks = args.max_ticks if args.max_ticks is not None else len(args.moves)
    for i in range(max_ticks):
        if engine.lifecycle.terminal:
            break
        direction = _MOVE_MAP[args.moves[i]] if i < len(args.moves) else None
        if direction is not None:
            engine.request_direction(direction)
        engine.tick()

    print(json.dumps(engine.get_state(), separators=(",", ":")))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``level-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "levels": _run_levels,
        "run": _run_game,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
