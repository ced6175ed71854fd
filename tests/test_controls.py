import random

import pygame
import pytest

from neurobreak.controls import DEFAULT_BINDINGS, DIRECTIONS, ControlMapping


def test_default_axis():
    controls = ControlMapping()
    assert controls.axis({pygame.K_w}) == (0, -1)
    assert controls.axis({pygame.K_DOWN}) == (0, 1)
    assert controls.axis({pygame.K_a, pygame.K_UP}) == (-1, -1)
    assert controls.axis({pygame.K_LEFT, pygame.K_RIGHT}) == (0, 0)
    assert controls.axis(set()) == (0, 0)
    assert not controls.scrambled


def test_scramble_partitions_default_key_sets():
    controls = ControlMapping()
    rng = random.Random(0)
    for _ in range(50):
        controls.scramble(rng)
        current = controls.current
        assert set(current) == set(DIRECTIONS)
        assert sorted(map(sorted, current.values())) == sorted(map(sorted, DEFAULT_BINDINGS.values()))


def test_scramble_eventually_moves_keys():
    controls = ControlMapping()
    rng = random.Random(5)
    outcomes = set()
    for _ in range(100):
        controls.scramble(rng)
        outcomes.add(tuple(controls.current[d] for d in DIRECTIONS))
    assert len(outcomes) > 1


def test_scramble_then_restore_round_trip():
    controls = ControlMapping()
    rng = random.Random(11)
    for _ in range(20):
        controls.scramble(rng)
        controls.restore()
        assert dict(controls.current) == dict(DEFAULT_BINDINGS)
        assert not controls.scrambled


def test_scrambled_mapping_drives_movement():
    controls = ControlMapping()

    class FixedShuffle(random.Random):
        def shuffle(self, x):
            x.reverse()

    controls.scramble(FixedShuffle())
    # up <- right keys, down <- left keys, left <- down keys, right <- up keys
    assert controls.axis({pygame.K_d}) == (0, -1)
    assert controls.axis({pygame.K_w}) == (1, 0)
    assert controls.scrambled


def test_default_is_read_only():
    controls = ControlMapping()
    with pytest.raises(TypeError):
        controls.default["up"] = frozenset({pygame.K_x})  # type: ignore[index]


def test_rejects_incomplete_mapping():
    with pytest.raises(ValueError):
        ControlMapping({"up": frozenset({pygame.K_w})})
    with pytest.raises(ValueError):
        ControlMapping({**DEFAULT_BINDINGS, "up": frozenset()})
