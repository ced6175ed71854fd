"""Quiz puzzles, their sources and the control-scramble gate."""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

import requests

from .config import FallbackPuzzle, PuzzleConfig
from .controls import ControlMapping
from .terminal import LineStyle, TerminalLog
from .timers import TimerRegistry

logger = logging.getLogger(__name__)

OPTION_COUNT = 4
PUZZLE_TIMER = "puzzle"


class PuzzleFormatError(ValueError):
    """Raised when a puzzle payload does not have the expected shape."""


def _as_text(value: Any, field_name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise PuzzleFormatError(f"{field_name} must be a string, got {type(value).__name__}")
    text = str(value).strip()
    if not text:
        raise PuzzleFormatError(f"{field_name} is empty")
    return text


@dataclass(frozen=True)
class Puzzle:
    question: str
    options: tuple[str, ...]
    answer: str

    @classmethod
    def from_payload(cls, data: Any) -> "Puzzle":
        if not isinstance(data, dict):
            raise PuzzleFormatError(f"expected an object, got {type(data).__name__}")
        missing = [key for key in ("question", "options", "answer") if key not in data]
        if missing:
            raise PuzzleFormatError(f"missing field(s): {', '.join(missing)}")
        options = data["options"]
        if not isinstance(options, (list, tuple)) or len(options) != OPTION_COUNT:
            raise PuzzleFormatError(f"options must be a list of {OPTION_COUNT} strings")
        return cls(
            question=_as_text(data["question"], "question"),
            options=tuple(_as_text(option, "option") for option in options),
            answer=_as_text(data["answer"], "answer"),
        )

    @classmethod
    def from_fallback(cls, fallback: FallbackPuzzle) -> "Puzzle":
        return cls(fallback.question, tuple(fallback.options), fallback.answer)

    @property
    def answer_number(self) -> Optional[int]:
        """1-based position of the answer among the options, if it is listed."""
        try:
            return self.options.index(self.answer) + 1
        except ValueError:
            return None

    def is_correct(self, text: str) -> bool:
        """Accept the answer text (any case) or its option number."""
        entry = text.strip()
        if entry.lower() == self.answer.lower():
            return True
        number = self.answer_number
        return number is not None and entry == str(number)


@dataclass(frozen=True)
class PuzzleRequest:
    subjects: str
    level: int
    age: int

    def to_payload(self) -> dict[str, Any]:
        return {"subjects": self.subjects, "level": self.level, "age": self.age}


class PuzzleTicket:
    """Handle on a puzzle that may still be in flight.

    A ticket that is not resolved within ``timeout`` seconds resolves itself to
    the fallback puzzle; anything delivered afterwards is dropped.
    """

    def __init__(
        self,
        fallback: Puzzle,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fallback = fallback
        self._timeout = timeout
        self._clock = clock
        self._started = clock()
        self._lock = threading.Lock()
        self._result: Optional[Puzzle] = None
        self._cancelled = False

    def resolve(self, puzzle: Puzzle) -> bool:
        with self._lock:
            if self._cancelled or self._result is not None:
                return False
            self._result = puzzle
            return True

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def done(self) -> bool:
        with self._lock:
            if self._cancelled:
                return False
            if self._result is not None:
                return True
            if self._timeout is not None and self._clock() - self._started >= self._timeout:
                logger.warning("Puzzle request timed out after %.0fs; using fallback", self._timeout)
                self._result = self._fallback
                return True
            return False

    def result(self) -> Puzzle:
        if not self.done() or self._result is None:
            raise RuntimeError("puzzle ticket is not resolved")
        return self._result


class PuzzleSource(Protocol):
    """Anything that can hand out puzzle tickets."""

    def request(self, request: PuzzleRequest) -> PuzzleTicket:
        """Start producing a puzzle for ``request``."""


class FallbackPuzzleSource:
    """Offline source that always answers with the built-in puzzle."""

    def __init__(self, config: Optional[PuzzleConfig] = None) -> None:
        self.config = config or PuzzleConfig()
        self.puzzle = Puzzle.from_fallback(self.config.fallback)

    def request(self, request: PuzzleRequest) -> PuzzleTicket:
        ticket = PuzzleTicket(self.puzzle)
        ticket.resolve(self.puzzle)
        return ticket


class HttpPuzzleSource:
    """Fetches generated puzzles from the backend on a worker thread."""

    def __init__(self, config: Optional[PuzzleConfig] = None) -> None:
        self.config = config or PuzzleConfig()
        self.fallback = Puzzle.from_fallback(self.config.fallback)

    def fetch(self, request: PuzzleRequest) -> Puzzle:
        """Blocking fetch; any failure yields the fallback puzzle."""
        try:
            # One request per fetch; worker threads never share a connection pool.
            response = requests.post(
                self.config.url,
                json=request.to_payload(),
                timeout=self.config.request_timeout,
            )
            response.raise_for_status()
            return Puzzle.from_payload(response.json())
        except requests.RequestException as exc:
            logger.warning("Puzzle request failed (%s); using fallback", exc)
        except ValueError as exc:
            # Undecodable JSON or a PuzzleFormatError.
            logger.warning("Puzzle response rejected (%s); using fallback", exc)
        return self.fallback

    def request(self, request: PuzzleRequest) -> PuzzleTicket:
        ticket = PuzzleTicket(self.fallback, timeout=self.config.request_timeout)
        threading.Thread(
            target=self._run,
            args=(request, ticket),
            name="PuzzleFetch",
            daemon=True,
        ).start()
        return ticket

    def _run(self, request: PuzzleRequest, ticket: PuzzleTicket) -> None:
        puzzle = self.fetch(request)
        if not ticket.resolve(puzzle):
            logger.debug("Discarding puzzle for a cancelled or expired request")


class GateState(Enum):
    STABLE = "stable"
    SCRAMBLED = "scrambled"
    RETRY = "retry"
    LOCKDOWN = "lockdown"


class AnswerResult(Enum):
    IGNORED = "ignored"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    LOCKDOWN = "lockdown"


class PuzzleGate:
    """Scrambles the controls and holds them scrambled until a correct answer.

    Stable -> Scrambled (new puzzle, attempts 0) -> Retry (one miss) ->
    Lockdown once ``max_attempts`` misses accumulate. A correct answer restores
    the default mapping and schedules the next scramble ``next_delay`` later.
    """

    def __init__(
        self,
        config: PuzzleConfig,
        controls: ControlMapping,
        timers: TimerRegistry,
        source: PuzzleSource,
        request: PuzzleRequest,
        terminal: TerminalLog,
        rng: random.Random,
    ) -> None:
        self.config = config
        self.controls = controls
        self.timers = timers
        self.source = source
        self.request = request
        self.terminal = terminal
        self.rng = rng
        self.state = GateState.STABLE
        self.puzzle: Optional[Puzzle] = None
        self.attempts = 0
        self._ticket: Optional[PuzzleTicket] = None

    @property
    def pending(self) -> bool:
        return self._ticket is not None

    def schedule(self, delay: float) -> None:
        self.timers.after(delay, self.trigger, PUZZLE_TIMER)

    def trigger(self) -> None:
        if self.state is not GateState.STABLE:
            return
        self.controls.scramble(self.rng)
        self.terminal.add("GLITCH DETECTED: CONTROLS RANDOMIZED!", LineStyle.WARNING)
        self.state = GateState.SCRAMBLED
        self.puzzle = None
        self.attempts = 0
        self._ticket = self.source.request(self.request)
        logger.debug("Puzzle requested for level %d", self.request.level)
        self.poll()

    def poll(self) -> Optional[Puzzle]:
        """Install the requested puzzle once it has arrived."""
        ticket = self._ticket
        if ticket is None or not ticket.done():
            return None
        self._ticket = None
        self.puzzle = ticket.result()
        self.attempts = 0
        self.terminal.add("NEURAL PUZZLE DETECTED", LineStyle.PUZZLE_HEADER)
        self.terminal.add(self.puzzle.question, LineStyle.QUESTION)
        for number, option in enumerate(self.puzzle.options, start=1):
            self.terminal.add(f"{number}. {option}", LineStyle.OPTION)
        self.terminal.add("Enter choice to restore systems.")
        return self.puzzle

    def submit(self, text: str) -> AnswerResult:
        entry = text.strip()
        if not entry:
            return AnswerResult.IGNORED
        self.terminal.add(f"$ {entry}", LineStyle.USER)
        if self.puzzle is None or self.state is GateState.LOCKDOWN:
            return AnswerResult.IGNORED

        if self.puzzle.is_correct(entry):
            self.terminal.add("CORRECT. SYSTEMS OPTIMIZED.", LineStyle.SUCCESS)
            self.terminal.add(f"Waiting for next security layer ({self.config.next_delay:g}s)...")
            self.restore()
            self.schedule(self.config.next_delay)
            return AnswerResult.CORRECT

        self.attempts += 1
        self.terminal.shake(self.config.shake_duration)
        if self.attempts >= self.config.max_attempts:
            self.state = GateState.LOCKDOWN
            self.terminal.add("MAXIMUM ATTEMPTS EXCEEDED. SYSTEM CRITICAL.", LineStyle.ERROR)
            logger.debug("Puzzle lockdown after %d attempts", self.attempts)
            return AnswerResult.LOCKDOWN
        self.state = GateState.RETRY
        left = self.config.max_attempts - self.attempts
        self.terminal.add(f"INCORRECT. {left} ATTEMPT{'S' if left != 1 else ''} REMAINING.", LineStyle.WARNING)
        return AnswerResult.INCORRECT

    def restore(self) -> None:
        self.controls.restore()
        self.puzzle = None
        self.attempts = 0
        self.state = GateState.STABLE
        self.terminal.add("SYSTEMS RESTORED: CONTROLS NORMALIZED.", LineStyle.SUCCESS)

    def cancel(self) -> None:
        if self._ticket is not None:
            self._ticket.cancel()
            self._ticket = None
        self.timers.cancel(PUZZLE_TIMER)
