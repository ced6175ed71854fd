"""One simulation frame over a session.

Update order: player, player projectiles, enemies (move, fire, collide),
enemy projectiles, then the victory check. Collections are walked back to
front so entries can be deleted in place without skipping any.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Optional

from .entities import Entity, make_enemy_projectile, make_projectile
from .input import InputState
from .physics import apply_damage, clamp, collides, is_offscreen, move
from .session import Session

logger = logging.getLogger(__name__)


class FrameOutcome(Enum):
    CONTINUE = "continue"
    WON = "won"
    LOST = "lost"


def step(session: Session, inputs: InputState, dt: float) -> FrameOutcome:
    session.clock += dt

    update_player(session, inputs, dt)
    update_projectiles(session, dt)
    if update_enemies(session, dt):
        logger.debug("Game over: health reached 0 from enemy contact")
        return FrameOutcome.LOST
    if update_enemy_projectiles(session, dt):
        logger.debug("Game over: health reached 0 from enemy projectile")
        return FrameOutcome.LOST
    if victory(session):
        logger.debug("Victory condition met on level %d", session.level)
        return FrameOutcome.WON
    return FrameOutcome.CONTINUE


def update_player(session: Session, inputs: InputState, dt: float) -> None:
    player = session.player
    dx, dy = session.controls.axis(inputs.pressed)
    player.x += dx * player.speed * dt
    player.y += dy * player.speed * dt

    r = player.radius
    player.x = clamp(player.x, r, max(r, session.width - r))
    player.y = clamp(player.y, r, max(r, session.height - r))

    px, py = inputs.pointer
    player.angle = math.atan2(py - player.y, px - player.x)

    if inputs.fire and session.clock - player.last_fire > session.config.player.fire_cooldown:
        session.projectiles.append(
            make_projectile(session.config.projectiles, player.x, player.y, player.angle)
        )
        player.last_fire = session.clock
        session.stats.shots_fired += 1


def update_projectiles(session: Session, dt: float) -> None:
    projectiles = session.projectiles
    for index in range(len(projectiles) - 1, -1, -1):
        projectile = projectiles[index]
        move(projectile, session.player, dt)
        if is_offscreen(projectile, session.width, session.height):
            del projectiles[index]


def hit_player(session: Session, cause: str) -> bool:
    """Apply one hit to the player. Returns True when it was fatal."""
    if session.shield_active:
        session.stats.shield_blocks += 1
        logger.debug("Shield blocked %s", cause)
        return False
    session.stats.hits_taken += 1
    health = apply_damage(
        session.player,
        session.config.combat.damage_per_hit,
        session.config.player.max_health,
    )
    return health <= 0


def _find_collision(entity: Entity, others: list[Entity]) -> Optional[int]:
    for index in range(len(others) - 1, -1, -1):
        if collides(entity, others[index]):
            return index
    return None


def update_enemies(session: Session, dt: float) -> bool:
    """Move, fire and collide every enemy. Returns True if the player died."""
    player = session.player
    enemies = session.enemies
    projectiles = session.projectiles
    fire_interval = session.spawner.fire_interval

    for index in range(len(enemies) - 1, -1, -1):
        enemy = enemies[index]
        move(enemy, player, dt)

        if session.clock - enemy.last_fire > fire_interval:
            session.enemy_projectiles.append(
                make_enemy_projectile(session.config.projectiles, enemy.x, enemy.y, player.x, player.y)
            )
            enemy.last_fire = session.clock

        if collides(player, enemy):
            if hit_player(session, "enemy collision"):
                return True
            del enemies[index]
            continue

        hit = _find_collision(enemy, projectiles)
        if hit is not None:
            del projectiles[hit]
            del enemies[index]
            session.stats.kills += 1
            continue

        if is_offscreen(enemy, session.width, session.height):
            del enemies[index]
    return False


def update_enemy_projectiles(session: Session, dt: float) -> bool:
    """Steer, collide and cull enemy shots. Returns True if the player died."""
    player = session.player
    shots = session.enemy_projectiles
    projectiles = session.projectiles

    for index in range(len(shots) - 1, -1, -1):
        shot = shots[index]
        move(shot, player, dt)

        if collides(player, shot):
            if hit_player(session, "projectile hit"):
                return True
            del shots[index]
            continue

        hit = _find_collision(shot, projectiles)
        if hit is not None:
            del projectiles[hit]
            del shots[index]
            continue

        if is_offscreen(shot, session.width, session.height):
            del shots[index]
    return False


def victory(session: Session) -> bool:
    return session.spawner.exhausted and not session.enemies
