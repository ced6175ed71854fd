# tests/conftest.py
import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from helpers import BOUNDS
from neurobreak.config import GameConfig
from neurobreak.loop import GameLoop
from neurobreak.puzzle import FallbackPuzzleSource
from neurobreak.session import Session


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config(tmp_path):
    return GameConfig(progress_path=tmp_path / "progress.json")


@pytest.fixture
def source(config):
    return FallbackPuzzleSource(config.puzzle)


@pytest.fixture
def session(config, source, rng):
    return Session.create(config, 1, BOUNDS, source, rng)


@pytest.fixture
def loop(config, source, rng):
    return GameLoop(config, source, bounds=BOUNDS, rng=rng)
