"""Global game state machine and frame scheduling."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, Optional

from . import simulation
from .config import GameConfig
from .input import InputState
from .progress import LevelProgress
from .puzzle import AnswerResult, PuzzleSource
from .session import Session

logger = logging.getLogger(__name__)


class GameState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    WON = "won"
    LOST = "lost"


class LossReason(Enum):
    HEALTH = "health"
    LOCKDOWN = "lockdown"
    TIME_UP = "time_up"


StateListener = Callable[[GameState, GameState], None]


class GameLoop:
    """Owns the current session and drives it one display refresh at a time.

    ``frame_pending`` plays the part of a requested animation frame: a frame
    runs only if one is pending, and it re-posts itself at the end unless the
    game stopped running during that frame. Every path that could post a
    frame checks the flag first, so there is never more than one in flight.
    """

    def __init__(
        self,
        config: GameConfig,
        source: PuzzleSource,
        progress: Optional[LevelProgress] = None,
        bounds: Optional[tuple[float, float]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.source = source
        self.progress = progress
        if bounds is None:
            width, height = config.window_size
            bounds = (width - config.render.terminal_width, height)
        self.bounds = (float(bounds[0]), float(bounds[1]))
        self.rng = rng or random.Random()
        self.state = GameState.IDLE
        self.session: Optional[Session] = None
        self.level = 1
        self.loss_reason: Optional[LossReason] = None
        self.frame_pending = False
        self.frames_posted = 0
        self.listeners: list[StateListener] = []

    # ----------------------------
    # Transitions
    # ----------------------------

    def start(self, level: int) -> Session:
        if self.session is not None:
            self.session.close()
        self.level = max(1, int(level))
        self.loss_reason = None
        self.session = Session.create(
            self.config,
            self.level,
            self.bounds,
            self.source,
            self.rng,
            on_time_up=self._time_up,
        )
        self._set_state(GameState.RUNNING)
        self._schedule_frame()
        return self.session

    def restart(self) -> Session:
        if self.state is GameState.IDLE:
            raise RuntimeError("no level to restart")
        return self.start(self.level)

    def next_level(self) -> Session:
        if self.state is not GameState.WON:
            raise RuntimeError("next level is only available after a win")
        return self.start(min(self.level + 1, self.config.session.level_count))

    def exit(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session.terminal.clear()
        self.session = None
        self.frame_pending = False
        self.loss_reason = None
        self._set_state(GameState.IDLE)

    def pause(self) -> bool:
        if self.state is not GameState.RUNNING:
            return False
        if self.session is None:
            raise RuntimeError("running without a session")
        self.session.suspend()
        self._set_state(GameState.PAUSED)
        return True

    def resume(self) -> bool:
        if self.state is not GameState.PAUSED:
            return False
        if self.session is None:
            raise RuntimeError("paused without a session")
        self.session.resume()
        self._set_state(GameState.RUNNING)
        self._schedule_frame()
        return True

    def toggle_pause(self) -> bool:
        if self.state is GameState.PAUSED:
            return self.resume()
        return self.pause()

    def resize(self, width: float, height: float) -> None:
        self.bounds = (float(width), float(height))
        if self.session is not None:
            self.session.resize(width, height)

    # ----------------------------
    # Per-refresh driving
    # ----------------------------

    def pump(self, dt: float, inputs: InputState) -> bool:
        """Handle one display refresh. Returns True if a frame was simulated."""
        session = self.session
        if session is not None:
            # Every refresh, including paused and finished sessions.
            session.terminal.update(dt)
        if self.state is GameState.RUNNING and session is not None:
            session.timers.advance(dt)
            if self.state is GameState.RUNNING:
                session.gate.poll()
        if not self.frame_pending:
            return False
        self.frame_pending = False
        return self._frame(dt, inputs)

    def submit_answer(self, text: str) -> AnswerResult:
        if self.state is not GameState.RUNNING or self.session is None:
            return AnswerResult.IGNORED
        result = self.session.gate.submit(text)
        if result is AnswerResult.LOCKDOWN:
            self._lose(LossReason.LOCKDOWN)
        return result

    def _frame(self, dt: float, inputs: InputState) -> bool:
        session = self.session
        if self.state is not GameState.RUNNING or session is None:
            # The loop stops here; resume() posts a fresh frame.
            return False
        outcome = simulation.step(session, inputs, dt)
        if outcome is simulation.FrameOutcome.LOST:
            self._lose(LossReason.HEALTH)
        elif outcome is simulation.FrameOutcome.WON:
            self._win()
        else:
            self._schedule_frame()
        return True

    def _schedule_frame(self) -> bool:
        if self.frame_pending:
            return False
        self.frame_pending = True
        self.frames_posted += 1
        return True

    # ----------------------------
    # Terminal states
    # ----------------------------

    def _time_up(self) -> None:
        self._lose(LossReason.TIME_UP)

    def _lose(self, reason: LossReason) -> None:
        if self.state not in (GameState.RUNNING, GameState.PAUSED):
            return
        self.loss_reason = reason
        if self.session is not None:
            self.session.close()
        self.frame_pending = False
        logger.info("Level %d lost (%s)", self.level, reason.value)
        self._set_state(GameState.LOST)

    def _win(self) -> None:
        if self.state is not GameState.RUNNING:
            return
        if self.session is not None:
            self.session.close()
        self.frame_pending = False
        if self.progress is not None:
            self.progress.unlock(self.level + 1)
        logger.info("Level %d cleared", self.level)
        self._set_state(GameState.WON)

    def _set_state(self, state: GameState) -> None:
        previous = self.state
        self.state = state
        if previous is not state:
            for listener in list(self.listeners):
                listener(previous, state)
