"""Periodic checks of battery, insulin reservoir and BG that raise warnings."""

from __future__ import annotations

import threading
from typing import Callable

from .cgm import CgmSimulator
from .records import HistoryManager, HistoryRecord, RecordType

WARNING_TITLE = "Pump Warning"
DEFAULT_INTERVAL = 30.0

Notifier = Callable[[str, str], None]


class WarningChecker:
    """Checks pump state and logs warnings to the history."""

    def __init__(
        self,
        history: HistoryManager | None,
        cgm: CgmSimulator | None,
        notify: Notifier | None = None,
        battery_level: int = 100,
        insulin_level: float = 200.0,
    ) -> None:
        self.history = history
        self.cgm = cgm
        self.notify = notify
        self.battery_level = battery_level  # 0..100 %
        self.insulin_level = insulin_level  # units left in cartridge
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def check(self) -> None:
        """Run one round of checks, draining 1 % of battery first."""
        if self.battery_level > 0:
            self.battery_level -= 1

        if self.battery_level == 5:
            self._log_warning("Battery critically low!")
        elif self.battery_level == 20:
            self._log_warning("Battery low!")

        if self.insulin_level <= 5:
            self._log_warning("Insulin critically low!")
        elif self.insulin_level <= 20:
            self._log_warning("Insulin low!")

        if self.cgm is not None:
            bg = self.cgm.current_bg
            if bg < 3.9:
                self._log_warning(f"BG critically low ({bg:.1f})!")
            elif bg > 13.9:
                self._log_warning(f"BG critically high ({bg:.1f})!")

    def _log_warning(self, message: str) -> None:
        if self.history is None or self.cgm is None:
            return
        self.history.add_record(
            HistoryRecord(self.cgm.sim_time_str, RecordType.WARNING, 0.0, message)
        )
        if self.notify is not None:
            self.notify(WARNING_TITLE, message)

    def start_monitoring(self, interval: float = DEFAULT_INTERVAL) -> None:
        """Run check() every interval seconds in a background thread."""
        self.stop_monitoring()
        self._stop = threading.Event()
        stop = self._stop

        def loop() -> None:
            while not stop.wait(interval):
                self.check()

        self._thread = threading.Thread(target=loop, daemon=True)
        self._thread.start()

    def stop_monitoring(self) -> None:
        """Stop the background checks, if running."""
        self._stop.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None