import random

import pygame
import pytest

from helpers import BOUNDS, IDLE, without_shield
from neurobreak import simulation
from neurobreak.entities import make_enemy, make_enemy_projectile, make_player, make_projectile
from neurobreak.input import InputState
from neurobreak.session import Session
from neurobreak.simulation import FrameOutcome

DT = 0.001


@pytest.fixture
def unshielded(config, source, rng):
    return Session.create(without_shield(config), 1, BOUNDS, source, rng)


def shot_at(session, x, y):
    cfg = session.config.projectiles
    return make_enemy_projectile(cfg, x, y, x, y + 1)


def enemy_at(session, x, y):
    enemy = make_enemy(session.config.enemies, x, random.Random(0))
    enemy.y = y
    enemy.last_fire = 0.0
    return enemy


def test_player_starts_centered_near_bottom(session):
    assert session.player.x == 400
    assert session.player.y == 550
    assert session.health == 100


def test_three_unshielded_hits_cost_thirty_health(unshielded):
    player = unshielded.player
    for _ in range(3):
        unshielded.enemy_projectiles.append(shot_at(unshielded, player.x, player.y))
    assert simulation.step(unshielded, IDLE, DT) is FrameOutcome.CONTINUE
    assert unshielded.health == 70
    assert unshielded.enemy_projectiles == []
    assert unshielded.stats.hits_taken == 3


def test_shield_blocks_hits(session):
    assert session.shield_active
    player = session.player
    for _ in range(3):
        session.enemy_projectiles.append(shot_at(session, player.x, player.y))
    simulation.step(session, IDLE, DT)
    assert session.health == 100
    assert session.enemy_projectiles == []
    assert session.stats.shield_blocks == 3


def test_shield_follows_session_clock(session):
    session.clock = 5.0
    assert not session.shield_active
    session.clock = 10.0
    assert session.shield_active


def test_enemy_contact_while_shielded_removes_enemy(session):
    player = session.player
    session.enemies.append(enemy_at(session, player.x, player.y))
    simulation.step(session, IDLE, DT)
    assert session.enemies == []
    assert session.health == 100
    assert session.stats.shield_blocks == 1


def test_enemy_contact_without_shield_damages(unshielded):
    player = unshielded.player
    unshielded.enemies.append(enemy_at(unshielded, player.x, player.y))
    simulation.step(unshielded, IDLE, DT)
    assert unshielded.enemies == []
    assert unshielded.health == 90


def test_fatal_hit_loses(unshielded):
    unshielded.player.health = 10
    player = unshielded.player
    unshielded.enemy_projectiles.append(shot_at(unshielded, player.x, player.y))
    assert simulation.step(unshielded, IDLE, DT) is FrameOutcome.LOST
    assert unshielded.health_display == 0


def test_projectile_and_enemy_annihilate(session):
    cfg = session.config.projectiles
    session.enemies.append(enemy_at(session, 200, 100))
    session.projectiles.append(make_projectile(cfg, 200, 100, 0.0))
    simulation.step(session, IDLE, DT)
    assert session.enemies == []
    assert session.projectiles == []
    assert session.stats.kills == 1


def test_projectile_and_enemy_projectile_annihilate(session):
    cfg = session.config.projectiles
    session.enemy_projectiles.append(shot_at(session, 400, 100))
    session.projectiles.append(make_projectile(cfg, 400, 100, -1.57))
    simulation.step(session, IDLE, DT)
    assert session.enemy_projectiles == []
    assert session.projectiles == []
    assert session.stats.kills == 0


def test_one_projectile_kills_at_most_one_enemy(session):
    cfg = session.config.projectiles
    session.enemies.append(enemy_at(session, 200, 100))
    session.enemies.append(enemy_at(session, 202, 100))
    session.projectiles.append(make_projectile(cfg, 201, 100, 0.0))
    simulation.step(session, IDLE, DT)
    assert len(session.enemies) == 1
    assert session.stats.kills == 1


def test_offscreen_entities_are_culled(session):
    cfg = session.config.projectiles
    session.projectiles.append(make_projectile(cfg, -20, 300, 3.14))
    session.enemies.append(enemy_at(session, 400, 700))
    session.enemy_projectiles.append(shot_at(session, 900, 300))
    simulation.step(session, IDLE, DT)
    assert session.projectiles == []
    assert session.enemies == []
    assert session.enemy_projectiles == []


def test_enemy_fires_immediately_then_waits(session):
    enemy = make_enemy(session.config.enemies, 100, random.Random(0))
    session.enemies.append(enemy)
    simulation.step(session, IDLE, DT)
    assert len(session.enemy_projectiles) == 1
    for _ in range(10):
        simulation.step(session, IDLE, 0.1)
    assert len(session.enemy_projectiles) == 1


def test_fire_cooldown(session):
    firing = InputState(pressed=frozenset({pygame.K_SPACE}), pointer=(400.0, 0.0))
    for _ in range(4):
        simulation.step(session, firing, 0.1)
    assert session.stats.shots_fired == 2
    assert len(session.projectiles) == 2


def test_player_is_clamped_to_play_area(session):
    left = InputState(pressed=frozenset({pygame.K_a}))
    for _ in range(10):
        simulation.step(session, left, 1.0)
    assert session.player.x == session.player.radius


def test_scrambled_controls_move_player(session):
    class Reverse(random.Random):
        def shuffle(self, x):
            x.reverse()

    session.controls.scramble(Reverse())
    simulation.step(session, InputState(pressed=frozenset({pygame.K_d})), 0.5)
    assert session.player.x == 400
    assert session.player.y == pytest.approx(550 - 120)


def test_victory_when_cap_reached_and_field_clear(session):
    assert simulation.step(session, IDLE, DT) is FrameOutcome.CONTINUE
    session.spawner.spawned = session.spawner.cap
    session.enemies.append(enemy_at(session, 100, 100))
    assert simulation.step(session, IDLE, DT) is FrameOutcome.CONTINUE
    session.enemies.clear()
    assert simulation.step(session, IDLE, DT) is FrameOutcome.WON


def test_shield_cycle_is_anchored_at_player_creation(session):
    session.player = make_player(session.config.player, *BOUNDS, now=3.0)
    assert session.player.spawned_at == 3.0
    session.clock = 7.5
    assert session.shield_active
    session.clock = 8.0
    assert not session.shield_active
