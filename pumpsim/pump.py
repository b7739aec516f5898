"""Insulin delivery: manual boluses and automatic Control-IQ adjustments."""

from __future__ import annotations

from .cgm import CgmSimulator
from .profiles import UserProfileManager
from .records import HistoryManager, HistoryRecord, RecordType
from .safety import BolusSafetyError, BolusSafetyManager

LOW_PREDICTION = 3.9
AUTO_BOLUS_PREDICTION = 14.0
RAISE_BASAL_PREDICTION = 10.0
AUTO_BOLUS_UNITS = 1.0
TREND_READINGS = 6


class PumpController:
    """Delivers manual boluses and reacts to each CGM reading."""

    def __init__(
        self,
        profile_manager: UserProfileManager,
        history: HistoryManager,
        safety: BolusSafetyManager,
        cgm: CgmSimulator,
    ) -> None:
        self.profile_manager = profile_manager
        self.history = history
        self.safety = safety
        self.cgm = cgm
        cgm.subscribe(self.on_cgm_updated)

    def _log(self, record_type: RecordType, amount: float, notes: str) -> None:
        self.history.add_record(
            HistoryRecord(self.cgm.sim_time_str, record_type, amount, notes)
        )

    def request_bolus(
        self,
        total_bolus: float,
        notes: str,
        extended_fraction: float = 0.0,
        duration_hours: int = 0,
    ) -> None:
        """Deliver a manual bolus, optionally split into an extended part.

        Raises BolusSafetyError if the safety limits forbid the bolus.
        """
        self.safety.check(total_bolus)

        immediate = total_bolus
        extended = 0.0
        if 0.0 < extended_fraction < 1.0:
            immediate = total_bolus * (1.0 - extended_fraction)
            extended = total_bolus * extended_fraction

        self.safety.record_bolus(immediate)
        self._log(RecordType.MANUAL_BOLUS, immediate, notes + " (Immediate portion)")

        if extended > 0.0:
            self.safety.record_bolus(extended)
            self._log(
                RecordType.MANUAL_BOLUS,
                extended,
                f"Extended portion over {duration_hours}hr",
            )

    def on_cgm_updated(self, new_bg: float) -> None:
        """Log a CGM reading and run the Control-IQ check on it."""
        self._log(RecordType.CGM_READING, 0.0, f"BG= {new_bg:.1f} mmol/L")
        self._run_control_iq(new_bg)

    def _run_control_iq(self, current_bg: float) -> None:
        readings = self.cgm.last_six_readings
        if len(readings) < TREND_READINGS:
            return
        predicted = current_bg + (current_bg - readings[0])

        if predicted < LOW_PREDICTION:
            self._log(
                RecordType.OTHER,
                0.0,
                f"Basal suspended by Control-IQ (predBG= {predicted:.1f})",
            )
        elif predicted >= AUTO_BOLUS_PREDICTION:
            self._deliver_auto_bolus(
                AUTO_BOLUS_UNITS, f"Auto correction (predBG= {predicted:.1f})"
            )
        elif predicted >= RAISE_BASAL_PREDICTION:
            self._log(
                RecordType.OTHER,
                0.0,
                f"Basal increased by Control-IQ (predBG= {predicted:.1f})",
            )

    def _deliver_auto_bolus(self, units: float, reason: str) -> None:
        try:
            self.safety.check(units)
        except BolusSafetyError as exc:
            self._log(RecordType.WARNING, 0.0, f"Auto-bolus blocked: {exc}")
            return
        self.safety.record_bolus(units)
        self._log(RecordType.AUTO_BOLUS, units, reason)