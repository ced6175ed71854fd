"""Entity records for the player, enemies and projectiles.

Every object in play is an :class:`Entity` tagged with an :class:`EntityKind`.
Fields that only make sense for some kinds (health, facing angle, homing) keep
neutral defaults on the others. Behaviour lives in :mod:`neurobreak.physics`
and :mod:`neurobreak.simulation`, dispatched on ``kind``.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum

import pygame

from .config import EnemyConfig, PlayerConfig, ProjectileConfig

Color = tuple[int, int, int]


class EntityKind(Enum):
    PLAYER = "player"
    PROJECTILE = "projectile"
    ENEMY = "enemy"
    ENEMY_PROJECTILE = "enemy_projectile"


@dataclass
class Entity:
    """A drawable, movable circle."""

    kind: EntityKind
    x: float
    y: float
    radius: float
    color: Color
    vx: float = 0.0
    vy: float = 0.0
    speed: float = 0.0
    homing: float = 0.0  # steering strength towards the player, per second
    last_fire: float = -math.inf  # session clock of the last shot
    angle: float = 0.0  # facing, radians (player only)
    health: int = 0  # player only
    spawned_at: float = 0.0  # session clock at creation, anchors the shield cycle


def make_player(config: PlayerConfig, width: float, height: float, now: float = 0.0) -> Entity:
    """Player centred above the bottom edge; ``now`` anchors its shield cycle."""
    return Entity(
        kind=EntityKind.PLAYER,
        x=width / 2,
        y=height - config.bottom_offset,
        radius=config.radius,
        color=config.color,
        speed=config.speed,
        health=config.max_health,
        spawned_at=now,
    )


def make_projectile(config: ProjectileConfig, x: float, y: float, angle: float) -> Entity:
    """Player shot; its velocity is fixed at creation from the firing angle."""
    return Entity(
        kind=EntityKind.PROJECTILE,
        x=x,
        y=y,
        radius=config.radius,
        color=config.color,
        vx=math.cos(angle) * config.speed,
        vy=math.sin(angle) * config.speed,
        speed=config.speed,
    )


def make_enemy_projectile(
    config: ProjectileConfig,
    x: float,
    y: float,
    target_x: float,
    target_y: float,
) -> Entity:
    """Homing shot aimed at the target's position at the moment of firing."""
    angle = math.atan2(target_y - y, target_x - x)
    return Entity(
        kind=EntityKind.ENEMY_PROJECTILE,
        x=x,
        y=y,
        radius=config.enemy_radius,
        color=config.enemy_color,
        vx=math.cos(angle) * config.enemy_speed,
        vy=math.sin(angle) * config.enemy_speed,
        speed=config.enemy_speed,
        homing=config.enemy_homing_strength,
    )


def make_enemy(config: EnemyConfig, x: float, rng: random.Random) -> Entity:
    """Enemy entering from the top edge, initially heading straight down."""
    speed = rng.uniform(config.min_speed, config.max_speed)
    return Entity(
        kind=EntityKind.ENEMY,
        x=x,
        y=0.0,
        radius=config.radius,
        color=config.color,
        vx=0.0,
        vy=speed,
        speed=speed,
        homing=config.homing_strength,
    )


def draw_entity(surface: pygame.Surface, entity: Entity) -> None:
    """Render a filled disc for the entity."""
    centre = (round(entity.x), round(entity.y))
    pygame.draw.circle(surface, entity.color, centre, max(1, round(entity.radius)))
