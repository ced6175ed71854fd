"""Input abstractions for the shooter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import pygame

FIRE_KEY = pygame.K_SPACE


@dataclass(frozen=True)
class InputState:
    """Snapshot of player intent read by one frame."""

    pressed: frozenset[int] = field(default_factory=frozenset)
    pointer: tuple[float, float] = (0.0, 0.0)

    @property
    def fire(self) -> bool:
        return FIRE_KEY in self.pressed


class InputProvider(Protocol):
    """Interface for supplying player input to the game loop."""

    def poll(self) -> InputState:
        """Return an InputState representing the latest player intent."""


class KeyboardInput(InputProvider):
    """Keyboard and pointer state collected from pygame events.

    Events only update the held-key set and pointer position; the next frame
    reads whatever was written last.
    """

    def __init__(self) -> None:
        self._pressed: set[int] = set()
        self._pointer = (0.0, 0.0)
        self.enabled = True

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            if self.enabled:
                self._pressed.add(event.key)
        elif event.type == pygame.KEYUP:
            self._pressed.discard(event.key)
        elif event.type == pygame.MOUSEMOTION:
            self._pointer = (float(event.pos[0]), float(event.pos[1]))

    def poll(self) -> InputState:
        return InputState(pressed=frozenset(self._pressed), pointer=self._pointer)

    def reset(self) -> None:
        """Forget held keys (focus changes, new session)."""
        self._pressed.clear()
