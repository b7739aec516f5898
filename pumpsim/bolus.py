"""Bolus calculation and the manual bolus entry form."""

from __future__ import annotations

import math
from enum import Enum

from .cgm import CgmSimulator
from .profiles import UserProfile, UserProfileManager
from .pump import PumpController

FALLBACK_BG = 7.0


class BgSource(Enum):
    """Where the BG value for a bolus comes from."""

    MANUAL = "manual"
    CGM = "cgm"


class InvalidInputError(ValueError):
    """Raised when the form holds a value that cannot be used."""


def calculate_suggested_bolus(
    profile: UserProfile, bg: float, carbs: float, iob: float
) -> float:
    """Food bolus plus correction above target, minus insulin on board, floored at 0."""
    food = carbs / profile.carb_ratio if profile.carb_ratio > 0.0 else 0.0
    correction = 0.0
    if bg > profile.target_glucose and profile.correction_factor > 0.0:
        correction = (bg - profile.target_glucose) / profile.correction_factor
    return max(0.0, food + correction - iob)


def _parse(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class BolusForm:
    """Text-based bolus entry: BG, carbs, IOB, suggestion and extended options."""

    def __init__(
        self,
        profile_manager: UserProfileManager,
        pump: PumpController,
        cgm: CgmSimulator | None = None,
    ) -> None:
        self.profile_manager = profile_manager
        self.pump = pump
        self.cgm = cgm
        self.bg_text = ""
        self.carbs_text = ""
        self.iob_text = ""
        self.suggested_text = ""
        self.extended = False
        self._extended_percent = 40
        self._extended_hours = 3
        self.bg_source = BgSource.MANUAL
        if cgm is not None:
            cgm.subscribe(self.on_cgm_bg)
        self.set_bg_source(BgSource.MANUAL)

    @property
    def extended_percent(self) -> int:
        """Share of the bolus delivered as extended, 0..100."""
        return self._extended_percent

    @extended_percent.setter
    def extended_percent(self, value: int) -> None:
        if not 0 <= value <= 100:
            raise ValueError("extended percent must be between 0 and 100")
        self._extended_percent = value

    @property
    def extended_hours(self) -> int:
        """Duration of the extended part in hours, 1..24."""
        return self._extended_hours

    @extended_hours.setter
    def extended_hours(self, value: int) -> None:
        if not 1 <= value <= 24:
            raise ValueError("extended hours must be between 1 and 24")
        self._extended_hours = value

    @property
    def bg_editable(self) -> bool:
        """Whether BG is typed in by hand."""
        return self.bg_source is BgSource.MANUAL

    def set_bg_source(self, source: BgSource) -> None:
        """Choose manual or CGM BG; CGM fills the BG field from the sensor."""
        self.bg_source = source
        if source is BgSource.CGM and self.cgm is not None:
            self.bg_text = f"{self.cgm.current_bg:.1f}"

    def on_cgm_bg(self, new_bg: float) -> None:
        """Refresh the BG field from a new CGM reading when CGM is the source."""
        if self.bg_source is BgSource.CGM:
            self.bg_text = f"{new_bg:.1f}"

    def calculate(self) -> float:
        """Compute the suggested bolus, store it in the form and return it."""
        carbs = _parse(self.carbs_text)
        iob = _parse(self.iob_text)

        if self.bg_source is BgSource.MANUAL:
            bg = _parse(self.bg_text)
            if bg is None:
                raise InvalidInputError("Please enter a valid BG value.")
        else:
            bg = self.cgm.current_bg if self.cgm is not None else FALLBACK_BG

        if carbs is None or iob is None:
            raise InvalidInputError("Please enter valid Carbs/IOB.")

        suggestion = calculate_suggested_bolus(
            self.profile_manager.active_profile, bg, carbs, iob
        )
        self.suggested_text = f"{suggestion:.2f}"
        return suggestion

    def deliver(self) -> float:
        """Deliver the suggested bolus and return the units delivered.

        Returns 0.0 when the suggestion is zero; raises InvalidInputError when
        there is no suggestion and BolusSafetyError when the pump refuses.
        """
        total = _parse(self.suggested_text)
        if total is None:
            raise InvalidInputError("No suggested bolus to deliver.")
        if total <= 0:
            return 0.0

        fraction = 0.0
        hours = 0
        if self.extended:
            fraction = self._extended_percent / 100.0
            hours = self._extended_hours

        notes = (
            f"Manual Bolus. BG={self.bg_text}, "
            f"Carbs={self.carbs_text}, IOB={self.iob_text}"
        )
        self.pump.request_bolus(total, notes, fraction, hours)
        return total