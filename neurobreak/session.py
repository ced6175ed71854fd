"""Per-level session state and its timers."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from .config import GameConfig
from .controls import ControlMapping
from .entities import Entity, make_player
from .physics import clamp, shield_active
from .puzzle import PuzzleGate, PuzzleRequest, PuzzleSource
from .spawner import Spawner
from .terminal import TerminalLog
from .timers import TimerRegistry

logger = logging.getLogger(__name__)

COUNTDOWN_TIMER = "countdown"


@dataclass
class SessionStats:
    kills: int = 0
    hits_taken: int = 0
    shield_blocks: int = 0
    shots_fired: int = 0


class Countdown:
    """Whole-second level clock, ticked by a one-second repeating timer."""

    def __init__(self, seconds: int, timers: TimerRegistry, on_expire: Callable[[], None]) -> None:
        self.remaining = max(0, int(seconds))
        self.timers = timers
        self.on_expire = on_expire

    def start(self) -> None:
        self.timers.every(1.0, self.tick, COUNTDOWN_TIMER)

    def tick(self) -> None:
        self.remaining = max(0, self.remaining - 1)
        if self.remaining <= 0:
            self.timers.cancel(COUNTDOWN_TIMER)
            self.on_expire()

    @property
    def display(self) -> str:
        minutes, seconds = divmod(self.remaining, 60)
        return f"{minutes}:{seconds:02d}"


class Session:
    """Everything owned by one play-through of a level.

    Built by :meth:`create`; :meth:`close` cancels every timer and the
    in-flight puzzle so nothing outlives it.
    """

    def __init__(
        self,
        config: GameConfig,
        level: int,
        width: float,
        height: float,
        source: PuzzleSource,
        rng: random.Random,
        on_time_up: Callable[[], None],
    ) -> None:
        self.config = config
        self.level = level
        self.width = float(width)
        self.height = float(height)
        self.rng = rng
        self.clock = 0.0
        self.stats = SessionStats()
        self.closed = False

        self.player: Entity = make_player(config.player, self.width, self.height, now=self.clock)
        self.projectiles: list[Entity] = []
        self.enemies: list[Entity] = []
        self.enemy_projectiles: list[Entity] = []

        self.timers = TimerRegistry()
        self.terminal = TerminalLog(max_lines=config.render.terminal_lines * 4)
        self.controls = ControlMapping()
        self.spawner = Spawner(
            config.difficulty,
            config.enemies,
            level,
            self.enemies,
            self.timers,
            rng,
            self.width,
        )
        request = PuzzleRequest(
            subjects=config.profile.subjects or "General Science",
            level=level,
            age=config.profile.age or 18,
        )
        self.gate = PuzzleGate(config.puzzle, self.controls, self.timers, source, request, self.terminal, rng)
        self.countdown = Countdown(config.session.time_limit, self.timers, on_time_up)

    @classmethod
    def create(
        cls,
        config: GameConfig,
        level: int,
        bounds: tuple[float, float],
        source: PuzzleSource,
        rng: Optional[random.Random] = None,
        on_time_up: Optional[Callable[[], None]] = None,
    ) -> "Session":
        session = cls(
            config,
            level,
            bounds[0],
            bounds[1],
            source,
            rng or random.Random(),
            on_time_up or (lambda: None),
        )
        session.start()
        return session

    def start(self) -> None:
        self.terminal.add("System Initialized. Awaiting input...")
        self.terminal.add(f"Neural Encryption initializing... ({self.config.puzzle.first_delay:g}s)")
        self.controls.restore()
        self.spawner.start()
        self.countdown.start()
        self.gate.schedule(self.config.puzzle.first_delay)
        logger.debug(
            "Session started: level=%d cap=%d fire_interval=%.1fs",
            self.level,
            self.spawner.cap,
            self.spawner.fire_interval,
        )

    @property
    def shield_active(self) -> bool:
        cfg = self.config.player
        return shield_active(self.clock - self.player.spawned_at, cfg.shield_cycle, cfg.shield_active)

    @property
    def health(self) -> int:
        return self.player.health

    @property
    def health_display(self) -> int:
        return max(0, self.player.health)

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.spawner.width = self.width
        r = self.player.radius
        self.player.x = clamp(self.player.x, r, max(r, self.width - r))
        self.player.y = clamp(self.player.y, r, max(r, self.height - r))

    def suspend(self) -> None:
        self.timers.suspend()

    def resume(self) -> None:
        self.timers.resume()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.gate.cancel()
        self.timers.cancel_all()
        logger.debug("Session for level %d closed", self.level)
