"""Session-owned timers advanced by the frame clock."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class _Timer:
    name: str
    callback: Callable[[], None]
    remaining: float
    interval: Optional[float]  # None for one-shot timers
    cancelled: bool = False


class TimerRegistry:
    """Named repeating and one-shot timers that can all be cancelled at once.

    Timers only move when :meth:`advance` is called, so suspending the
    registry (pause) freezes every countdown in place.
    """

    def __init__(self) -> None:
        self._timers: dict[str, _Timer] = {}
        self.suspended = False

    def every(self, interval: float, callback: Callable[[], None], name: str) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._register(_Timer(name, callback, interval, interval))

    def after(self, delay: float, callback: Callable[[], None], name: str) -> None:
        self._register(_Timer(name, callback, max(0.0, delay), None))

    def _register(self, timer: _Timer) -> None:
        previous = self._timers.get(timer.name)
        if previous is not None:
            previous.cancelled = True
        self._timers[timer.name] = timer

    def cancel(self, name: str) -> bool:
        timer = self._timers.pop(name, None)
        if timer is None:
            return False
        timer.cancelled = True
        return True

    def cancel_all(self) -> int:
        count = len(self._timers)
        for timer in self._timers.values():
            timer.cancelled = True
        self._timers.clear()
        if count:
            logger.debug("Cancelled %d timer(s)", count)
        return count

    def active(self, name: str) -> bool:
        return name in self._timers

    def remaining(self, name: str) -> Optional[float]:
        timer = self._timers.get(name)
        return None if timer is None else timer.remaining

    def suspend(self) -> None:
        self.suspended = True

    def resume(self) -> None:
        self.suspended = False

    def advance(self, dt: float) -> None:
        if self.suspended or dt <= 0:
            return
        # Snapshot: callbacks may add, replace or cancel timers.
        for timer in list(self._timers.values()):
            if timer.cancelled:
                continue
            timer.remaining -= dt
            while timer.remaining <= 1e-9 and not timer.cancelled:
                if timer.interval is None:
                    self._timers.pop(timer.name, None)
                    timer.cancelled = True
                    timer.callback()
                    break
                timer.remaining += timer.interval
                timer.callback()
                if self.suspended:
                    break
            if self.suspended:
                break

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, name: object) -> bool:
        return name in self._timers
