"""Configuration data structures for the arcade shooter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# (max_level, value) pairs; the first row whose max_level >= level wins.
LevelTable = tuple[tuple[int, float], ...]


def lookup_level(table: LevelTable, level: int, default: float) -> float:
    """Return the value for ``level`` from a threshold table."""
    for max_level, value in table:
        if level <= max_level:
            return value
    return default


@dataclass(frozen=True)
class PlayerConfig:
    """Player ship movement, health and shield parameters."""

    radius: float = 15.0
    speed: float = 240.0  # px/s
    max_health: int = 100
    fire_cooldown: float = 0.25  # seconds between shots
    shield_cycle: float = 10.0  # full duty cycle, seconds
    shield_active: float = 5.0  # shield is up for the first part of each cycle
    bottom_offset: float = 50.0  # spawn distance above the bottom edge
    color: tuple[int, int, int] = (0, 255, 255)


@dataclass(frozen=True)
class ProjectileConfig:
    """Player and enemy projectile parameters."""

    radius: float = 5.0
    speed: float = 420.0
    color: tuple[int, int, int] = (255, 255, 255)
    enemy_radius: float = 5.0
    enemy_speed: float = 180.0
    enemy_homing_strength: float = 1.0  # fraction of speed nudged per second
    enemy_color: tuple[int, int, int] = (249, 115, 22)


@dataclass(frozen=True)
class EnemyConfig:
    """Enemy size and pursuit behaviour."""

    radius: float = 15.0
    min_speed: float = 48.0
    max_speed: float = 78.0
    homing_strength: float = 4.0
    color: tuple[int, int, int] = (239, 68, 68)


@dataclass(frozen=True)
class DifficultyConfig:
    """Spawn timing and level-scaled enemy limits."""

    spawn_interval: float = 1.5
    enemy_caps: LevelTable = ((5, 10), (15, 20))
    max_enemy_cap: int = 25
    fire_intervals: LevelTable = ((5, 3.0), (15, 2.0))
    min_fire_interval: float = 1.5

    def enemy_cap(self, level: int) -> int:
        return int(lookup_level(self.enemy_caps, level, self.max_enemy_cap))

    def fire_interval(self, level: int) -> float:
        return float(lookup_level(self.fire_intervals, level, self.min_fire_interval))


@dataclass(frozen=True)
class CombatConfig:
    """Damage dealt to the player per unblocked hit."""

    damage_per_hit: int = 10


@dataclass(frozen=True)
class FallbackPuzzle:
    question: str = "What is 2 + 2?"
    options: tuple[str, ...] = ("3", "4", "5", "6")
    answer: str = "4"


@dataclass(frozen=True)
class PuzzleConfig:
    """Puzzle generator endpoint and gate timing."""

    url: str = "http://localhost:3000/api/generate-puzzle"
    request_timeout: float = 60.0
    first_delay: float = 10.0  # wait before the first scramble of a session
    next_delay: float = 10.0  # wait after a correct answer before the next one
    max_attempts: int = 2
    shake_duration: float = 0.4
    offline: bool = False
    fallback: FallbackPuzzle = field(default_factory=FallbackPuzzle)


@dataclass(frozen=True)
class ProfileConfig:
    """Player details sent along with puzzle requests."""

    subjects: str = "General Science"
    age: int = 18


@dataclass(frozen=True)
class SessionConfig:
    time_limit: int = 300  # seconds per level
    level_count: int = 30


@dataclass(frozen=True)
class RenderingConfig:
    """Visual parameters for the pygame front end."""

    background_color: tuple[int, int, int] = (11, 15, 25)
    panel_color: tuple[int, int, int] = (17, 24, 39)
    panel_border_color: tuple[int, int, int] = (45, 212, 191)
    ui_color: tuple[int, int, int] = (226, 232, 240)
    muted_color: tuple[int, int, int] = (148, 163, 184)
    shield_color: tuple[int, int, int] = (45, 212, 191)
    health_color: tuple[int, int, int] = (34, 197, 94)
    health_back_color: tuple[int, int, int] = (55, 65, 81)
    locked_color: tuple[int, int, int] = (75, 85, 99)
    terminal_width: int = 380
    terminal_lines: int = 40
    font_size: int = 24
    large_font_size: int = 56
    cannon_length: float = 30.0
    shake_amplitude: float = 6.0


@dataclass(frozen=True)
class GameConfig:
    """High-level configuration of the game."""

    window_size: tuple[int, int] = (1280, 720)
    target_fps: int = 60
    progress_path: Path = field(default_factory=lambda: Path.home() / ".neurobreak" / "progress.json")
    player: PlayerConfig = field(default_factory=PlayerConfig)
    projectiles: ProjectileConfig = field(default_factory=ProjectileConfig)
    enemies: EnemyConfig = field(default_factory=EnemyConfig)
    difficulty: DifficultyConfig = field(default_factory=DifficultyConfig)
    combat: CombatConfig = field(default_factory=CombatConfig)
    puzzle: PuzzleConfig = field(default_factory=PuzzleConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    render: RenderingConfig = field(default_factory=RenderingConfig)
