from pathlib import Path

import pytest

from main import build_config, parse_args
from neurobreak.config import GameConfig


def test_defaults_match_game_config():
    config = build_config(parse_args([]))
    defaults = GameConfig()
    assert config.puzzle == defaults.puzzle
    assert config.profile == defaults.profile
    assert config.combat == defaults.combat
    assert config.progress_path == defaults.progress_path


def test_overrides():
    args = parse_args(
        [
            "--offline",
            "--puzzle-url",
            "http://example.test/puzzle",
            "--puzzle-delay",
            "5",
            "--subjects",
            "Math, Physics",
            "--age",
            "11",
            "--damage",
            "20",
            "--progress-file",
            "saves/p.json",
        ]
    )
    config = build_config(args)
    assert config.puzzle.offline
    assert config.puzzle.url == "http://example.test/puzzle"
    assert config.puzzle.next_delay == 5.0
    assert config.puzzle.first_delay == 10.0
    assert config.profile.subjects == "Math, Physics"
    assert config.profile.age == 11
    assert config.combat.damage_per_hit == 20
    assert config.progress_path == Path("saves/p.json")


def test_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        parse_args(["--log-level", "LOUD"])
