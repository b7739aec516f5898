"""Simulated continuous glucose monitor."""

from __future__ import annotations

import random
from collections import deque
from typing import Callable, Protocol

MIN_BG = 2.5
MAX_BG = 18.0
MINUTES_PER_TICK = 5
HISTORY_LENGTH = 6


class _RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class CgmSimulator:
    """Random-walk BG generator; each tick advances simulated time by 5 minutes."""

    def __init__(self, rng: _RandomSource | None = None, start_bg: float = 7.0) -> None:
        self._rng: _RandomSource = rng if rng is not None else random.Random()
        self._current_bg = start_bg
        self._total_sim_minutes = 0
        self._last_six: deque[float] = deque(maxlen=HISTORY_LENGTH)
        self._subscribers: list[Callable[[float], None]] = []

    @property
    def current_bg(self) -> float:
        """Most recent BG value in mmol/L."""
        return self._current_bg

    @property
    def sim_time_str(self) -> str:
        """Simulated elapsed time as HH:MM."""
        hours, mins = divmod(self._total_sim_minutes, 60)
        return f"{hours:02d}:{mins:02d}"

    @property
    def last_six_readings(self) -> tuple[float, ...]:
        """Up to the last six readings, oldest first."""
        return tuple(self._last_six)

    def subscribe(self, callback: Callable[[float], None]) -> None:
        """Register a callback called with each new BG reading."""
        self._subscribers.append(callback)

    def tick(self) -> float:
        """Advance the simulation one step and notify subscribers."""
        self._total_sim_minutes += MINUTES_PER_TICK
        delta = (self._rng.randrange(20) - 10) / 50.0
        self._current_bg = min(MAX_BG, max(MIN_BG, self._current_bg + delta))
        self._last_six.append(self._current_bg)
        for callback in list(self._subscribers):
            callback(self._current_bg)
        return self._current_bg