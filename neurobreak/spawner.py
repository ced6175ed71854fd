"""Timed enemy spawning capped by level."""

from __future__ import annotations

import logging
import random
from typing import Optional

from .config import DifficultyConfig, EnemyConfig
from .entities import Entity, make_enemy
from .timers import TimerRegistry

logger = logging.getLogger(__name__)

SPAWN_TIMER = "spawn"


class Spawner:
    """Adds one enemy along the top edge every ``spawn_interval`` seconds."""

    def __init__(
        self,
        difficulty: DifficultyConfig,
        enemy_config: EnemyConfig,
        level: int,
        enemies: list[Entity],
        timers: TimerRegistry,
        rng: random.Random,
        width: float,
    ) -> None:
        self.difficulty = difficulty
        self.enemy_config = enemy_config
        self.level = level
        self.enemies = enemies
        self.timers = timers
        self.rng = rng
        self.width = width
        self.cap = difficulty.enemy_cap(level)
        self.fire_interval = difficulty.fire_interval(level)
        self.spawned = 0

    @property
    def exhausted(self) -> bool:
        return self.spawned >= self.cap

    def start(self) -> None:
        if not self.exhausted:
            self.timers.every(self.difficulty.spawn_interval, self.spawn, SPAWN_TIMER)

    def spawn(self) -> Optional[Entity]:
        if self.exhausted:
            self.timers.cancel(SPAWN_TIMER)
            return None
        radius = self.enemy_config.radius
        span = max(0.0, self.width - radius * 2)
        enemy = make_enemy(self.enemy_config, self.rng.random() * span + radius, self.rng)
        self.enemies.append(enemy)
        self.spawned += 1
        if self.exhausted:
            logger.debug("Enemy cap of %d reached for level %d", self.cap, self.level)
            self.timers.cancel(SPAWN_TIMER)
        return enemy
