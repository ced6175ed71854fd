"""Collision tests, steering and boundary helpers."""

from __future__ import annotations

import math
from typing import Callable

from .entities import Entity, EntityKind


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def normalize(x: float, y: float, eps: float = 1e-8) -> tuple[float, float]:
    """Normalize a vector to unit length"""
    length = math.hypot(x, y)
    if length < eps:
        return 0.0, 0.0
    return x / length, y / length


def distance_squared(a: Entity, b: Entity) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


def collides(a: Entity, b: Entity) -> bool:
    """Check if two circles overlap without taking a square root."""
    reach = a.radius + b.radius
    return distance_squared(a, b) < reach * reach


def is_offscreen(entity: Entity, width: float, height: float) -> bool:
    """True once the whole disc has left the play area across any edge."""
    return (
        entity.x + entity.radius < 0
        or entity.x - entity.radius > width
        or entity.y + entity.radius < 0
        or entity.y - entity.radius > height
    )


def whole_millis(seconds: float) -> int:
    """Truncate to whole milliseconds, tolerating float noise just below an integer."""
    return int(math.floor(seconds * 1000 + 1e-6))


def shield_active(elapsed: float, cycle: float = 10.0, active: float = 5.0) -> bool:
    """Duty-cycled shield: up for the first ``active`` seconds of every ``cycle``.

    Evaluated on elapsed whole milliseconds, truncated like a millisecond clock.
    """
    return whole_millis(elapsed) % whole_millis(cycle) < whole_millis(active)


def apply_damage(entity: Entity, amount: int, max_health: int) -> int:
    """Subtract ``amount`` from health, clamped to [0, max_health]."""
    entity.health = int(clamp(entity.health - amount, 0, max_health))
    return entity.health


def steer_towards(entity: Entity, target: Entity, dt: float) -> None:
    """Nudge velocity towards the target, then restore the entity's speed.

    The nudge is ``homing * speed * dt`` along the unit vector to the target,
    which bounds the turn rate and gives curved pursuit paths.
    """
    ux, uy = normalize(target.x - entity.x, target.y - entity.y)
    if ux == 0.0 and uy == 0.0:
        return
    nudge = entity.homing * entity.speed * dt
    vx = entity.vx + ux * nudge
    vy = entity.vy + uy * nudge
    nx, ny = normalize(vx, vy)
    if nx == 0.0 and ny == 0.0:
        nx, ny = ux, uy
    entity.vx = nx * entity.speed
    entity.vy = ny * entity.speed


def advance(entity: Entity, dt: float) -> None:
    entity.x += entity.vx * dt
    entity.y += entity.vy * dt


def _move_ballistic(entity: Entity, target: Entity, dt: float) -> None:
    advance(entity, dt)


def _move_homing(entity: Entity, target: Entity, dt: float) -> None:
    steer_towards(entity, target, dt)
    advance(entity, dt)


MOVERS: dict[EntityKind, Callable[[Entity, Entity, float], None]] = {
    EntityKind.PROJECTILE: _move_ballistic,
    EntityKind.ENEMY: _move_homing,
    EntityKind.ENEMY_PROJECTILE: _move_homing,
}


def move(entity: Entity, target: Entity, dt: float) -> None:
    """Advance a non-player entity one step, dispatching on its kind."""
    MOVERS[entity.kind](entity, target, dt)
