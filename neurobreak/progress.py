"""Unlocked-level persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LevelProgress:
    """Set of unlocked levels stored as a JSON list. Level 1 is always open."""

    def __init__(self, path: Optional[Path] = None, level_count: int = 30) -> None:
        self.path = path
        self.level_count = level_count
        self._unlocked: set[int] = {1}
        if path is not None:
            self._unlocked |= self._load(path)

    def _load(self, path: Path) -> set[int]:
        if not path.exists():
            return set()
        try:
            with path.open() as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable progress file %s: %s", path, exc)
            return set()
        if not isinstance(data, list):
            logger.warning("Ignoring malformed progress file %s", path)
            return set()
        return {
            int(item)
            for item in data
            if isinstance(item, int) and not isinstance(item, bool) and 1 <= item <= self.level_count
        }

    def save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w") as f:
                json.dump(self.unlocked, f)
        except OSError as exc:
            logger.warning("Could not save progress to %s: %s", self.path, exc)

    @property
    def unlocked(self) -> list[int]:
        return sorted(self._unlocked)

    @property
    def highest(self) -> int:
        return max(self._unlocked)

    def is_unlocked(self, level: int) -> bool:
        return level in self._unlocked

    def unlock(self, level: int) -> bool:
        if level < 1 or level > self.level_count or level in self._unlocked:
            return False
        self._unlocked.add(level)
        self.save()
        return True
