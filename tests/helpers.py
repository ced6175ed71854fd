from dataclasses import replace

from neurobreak.config import GameConfig
from neurobreak.input import InputState

BOUNDS = (800.0, 600.0)
IDLE = InputState()


def without_shield(config: GameConfig) -> GameConfig:
    return replace(config, player=replace(config.player, shield_active=0.0))
