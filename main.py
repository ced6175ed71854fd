"""Entry point for the Neurobreak arcade shooter."""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from neurobreak import GameConfig, LevelProgress, NeurobreakGame, ProfileConfig, PuzzleConfig
from neurobreak.config import CombatConfig


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Neurobreak arcade shooter.")
    parser.add_argument(
        "--seed",
        type=int,
        help="Optional random seed for deterministic spawns and scrambles.",
    )
    parser.add_argument(
        "--level",
        type=int,
        help="Start this level directly instead of showing level select (must be unlocked).",
    )
    parser.add_argument(
        "--subjects",
        help="Comma-separated puzzle subjects (default: config value).",
    )
    parser.add_argument(
        "--age",
        type=int,
        help="Player age used to pitch puzzle difficulty (default: config value).",
    )
    parser.add_argument(
        "--puzzle-url",
        help="Override the puzzle generator endpoint.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Never contact the puzzle generator; always use the built-in puzzle.",
    )
    parser.add_argument(
        "--puzzle-delay",
        type=float,
        help="Seconds between a correct answer and the next scramble.",
    )
    parser.add_argument(
        "--damage",
        type=int,
        help="Health lost per unblocked hit.",
    )
    parser.add_argument(
        "--progress-file",
        type=Path,
        help="Where unlocked levels are stored (default: ~/.neurobreak/progress.json).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig()

    puzzle_cfg: PuzzleConfig = config.puzzle
    puzzle_overrides = {}
    if args.puzzle_url:
        puzzle_overrides["url"] = args.puzzle_url
    if args.offline:
        puzzle_overrides["offline"] = True
    if args.puzzle_delay is not None:
        puzzle_overrides["next_delay"] = args.puzzle_delay

    if puzzle_overrides:
        puzzle_cfg = replace(puzzle_cfg, **puzzle_overrides)
        config = replace(config, puzzle=puzzle_cfg)

    profile_cfg: ProfileConfig = config.profile
    profile_overrides = {}
    if args.subjects:
        profile_overrides["subjects"] = args.subjects
    if args.age is not None:
        profile_overrides["age"] = args.age

    if profile_overrides:
        profile_cfg = replace(profile_cfg, **profile_overrides)
        config = replace(config, profile=profile_cfg)

    if args.damage is not None:
        config = replace(config, combat=CombatConfig(damage_per_hit=args.damage))
    if args.progress_file is not None:
        config = replace(config, progress_path=args.progress_file)
    return config


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    rng = random.Random(args.seed) if args.seed is not None else random.Random()

    config = build_config(args)
    progress = LevelProgress(config.progress_path, config.session.level_count)

    game = NeurobreakGame(config=config, progress=progress, rng=rng)
    if args.level is not None:
        game.start_level(args.level)
    game.run()


if __name__ == "__main__":
    main()
