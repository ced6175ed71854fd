"""Arcade shooter with a control-scramble puzzle gate."""

from .config import GameConfig, ProfileConfig, PuzzleConfig
from .game import NeurobreakGame
from .loop import GameLoop, GameState, LossReason
from .progress import LevelProgress
from .puzzle import FallbackPuzzleSource, HttpPuzzleSource, Puzzle, PuzzleGate

__all__ = [
    "NeurobreakGame",
    "GameConfig",
    "ProfileConfig",
    "PuzzleConfig",
    "GameLoop",
    "GameState",
    "LossReason",
    "LevelProgress",
    "Puzzle",
    "PuzzleGate",
    "FallbackPuzzleSource",
    "HttpPuzzleSource",
]
