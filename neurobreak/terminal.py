"""Terminal transcript and single-line answer prompt."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterator, Optional

import pygame


class LineStyle(Enum):
    MESSAGE = "message"
    USER = "user"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    PUZZLE_HEADER = "puzzle_header"
    QUESTION = "question"
    OPTION = "option"


@dataclass(frozen=True)
class TerminalLine:
    text: str
    style: LineStyle = LineStyle.MESSAGE


class TerminalLog:
    """Bounded transcript of system and player messages."""

    def __init__(self, max_lines: int = 200) -> None:
        self._lines: Deque[TerminalLine] = deque(maxlen=max_lines)
        self.shake_timer = 0.0

    def add(self, text: str, style: LineStyle = LineStyle.MESSAGE) -> None:
        self._lines.append(TerminalLine(text, style))

    def clear(self) -> None:
        self._lines.clear()
        self.shake_timer = 0.0

    def shake(self, duration: float) -> None:
        self.shake_timer = max(self.shake_timer, duration)

    def update(self, dt: float) -> None:
        if self.shake_timer > 0.0:
            self.shake_timer = max(0.0, self.shake_timer - dt)

    @property
    def shaking(self) -> bool:
        return self.shake_timer > 0.0

    def tail(self, count: int) -> list[TerminalLine]:
        if count <= 0:
            return []
        return list(self._lines)[-count:]

    def __iter__(self) -> Iterator[TerminalLine]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


class TerminalPrompt:
    """Text field that submits its trimmed contents on Enter."""

    def __init__(self, max_length: int = 64) -> None:
        self.max_length = max_length
        self.text = ""
        self.focused = False

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def clear(self) -> None:
        self.text = ""

    def submit(self) -> Optional[str]:
        """Return the trimmed entry, or None when there is nothing to submit."""
        value = self.text.strip()
        self.text = ""
        self.blur()
        return value or None

    def handle_key(self, event: pygame.event.Event) -> Optional[str]:
        """Apply a KEYDOWN event; returns submitted text when Enter is pressed."""
        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            return self.submit()
        if event.key == pygame.K_ESCAPE:
            self.blur()
        elif event.key == pygame.K_BACKSPACE:
            self.text = self.text[:-1]
        else:
            char = getattr(event, "unicode", "")
            if char and char.isprintable() and len(self.text) < self.max_length:
                self.text += char
        return None
