"""Bolus safety limits: single-dose cap, daily cap and cooldown."""

from __future__ import annotations

import time
from typing import Callable


class BolusSafetyError(ValueError):
    """Raised when a bolus would break a safety constraint."""


def _fmt(value: float) -> str:
    return f"{value:g}"


class BolusSafetyManager:
    """Checks bolus requests against safety limits and records deliveries."""

    def __init__(
        self,
        max_single_bolus: float = 10.0,
        max_daily_bolus: float = 30.0,
        cooldown_minutes: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_single_bolus = max_single_bolus
        self.max_daily_bolus = max_daily_bolus
        self.cooldown_minutes = cooldown_minutes
        self._clock = clock
        self._total_daily_bolus = 0.0
        self._last_bolus_time: float | None = None

    @property
    def total_daily_bolus(self) -> float:
        """Units delivered so far today."""
        return self._total_daily_bolus

    def check(self, amount: float) -> None:
        """Raise BolusSafetyError if the amount may not be delivered now."""
        if amount <= 0:
            raise BolusSafetyError("Bolus must be > 0.")
        if amount > self.max_single_bolus:
            raise BolusSafetyError(
                f"Exceeds max single bolus of {_fmt(self.max_single_bolus)}U."
            )
        if self._total_daily_bolus + amount > self.max_daily_bolus:
            raise BolusSafetyError(
                f"Exceeds daily bolus limit of {_fmt(self.max_daily_bolus)}U."
            )
        if self._last_bolus_time is not None:
            secs_since_last = int(self._clock() - self._last_bolus_time)
            cooldown_secs = self.cooldown_minutes * 60
            if secs_since_last < cooldown_secs:
                remain_min = (cooldown_secs - secs_since_last) // 60
                raise BolusSafetyError(
                    f"Wait {remain_min} more min(s) before another bolus."
                )

    def can_deliver(self, amount: float) -> bool:
        """Whether the amount passes every safety check."""
        try:
            self.check(amount)
        except BolusSafetyError:
            return False
        return True

    def record_bolus(self, amount: float) -> None:
        """Add a delivered amount to the daily total and restart the cooldown."""
        self._total_daily_bolus += amount
        self._last_bolus_time = self._clock()