"""Direction-to-key mapping with scramble and restore."""

from __future__ import annotations

import logging
import random
from types import MappingProxyType
from typing import Iterable, Mapping

import pygame

logger = logging.getLogger(__name__)

DIRECTIONS: tuple[str, ...] = ("up", "down", "left", "right")

DEFAULT_BINDINGS: Mapping[str, frozenset[int]] = MappingProxyType(
    {
        "up": frozenset({pygame.K_w, pygame.K_UP}),
        "down": frozenset({pygame.K_s, pygame.K_DOWN}),
        "left": frozenset({pygame.K_a, pygame.K_LEFT}),
        "right": frozenset({pygame.K_d, pygame.K_RIGHT}),
    }
)


KEY_LABELS: Mapping[int, str] = MappingProxyType(
    {
        pygame.K_w: "W",
        pygame.K_s: "S",
        pygame.K_a: "A",
        pygame.K_d: "D",
        pygame.K_UP: "Up",
        pygame.K_DOWN: "Down",
        pygame.K_LEFT: "Left",
        pygame.K_RIGHT: "Right",
    }
)


class ControlMapping:
    """The mutable current mapping plus the immutable default it restores to."""

    def __init__(self, default: Mapping[str, frozenset[int]] = DEFAULT_BINDINGS) -> None:
        if set(default) != set(DIRECTIONS):
            raise ValueError(f"mapping must bind exactly {DIRECTIONS}, got {sorted(default)}")
        if any(not keys for keys in default.values()):
            raise ValueError("every direction needs at least one key")
        self.default: Mapping[str, frozenset[int]] = MappingProxyType(dict(default))
        self._current: dict[str, frozenset[int]] = dict(self.default)

    @property
    def current(self) -> Mapping[str, frozenset[int]]:
        return MappingProxyType(self._current)

    @property
    def scrambled(self) -> bool:
        return self._current != dict(self.default)

    def scramble(self, rng: random.Random) -> dict[str, frozenset[int]]:
        """Shuffle which key set drives which direction.

        The identity permutation is a legal outcome.
        """
        key_sets = [self.default[direction] for direction in DIRECTIONS]
        rng.shuffle(key_sets)
        self._current = dict(zip(DIRECTIONS, key_sets))
        logger.debug("Controls scrambled: %s", self.describe())
        return dict(self._current)

    def restore(self) -> None:
        """Put all four directions back to their defaults in one step."""
        self._current = dict(self.default)

    def is_held(self, direction: str, pressed: Iterable[int]) -> bool:
        keys = self._current[direction]
        return any(key in keys for key in pressed)

    def axis(self, pressed: Iterable[int]) -> tuple[int, int]:
        """Return (dx, dy) in {-1, 0, 1} for the held keys."""
        held = frozenset(pressed)
        dx = int(self.is_held("right", held)) - int(self.is_held("left", held))
        dy = int(self.is_held("down", held)) - int(self.is_held("up", held))
        return dx, dy

    def describe(self) -> str:
        parts = []
        for direction in DIRECTIONS:
            names = sorted(KEY_LABELS.get(key, str(key)) for key in self._current[direction])
            parts.append(f"{direction}={'/'.join(names)}")
        return " ".join(parts)
