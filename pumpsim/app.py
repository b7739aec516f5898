"""Console front end that wires the pump simulation together."""

from __future__ import annotations

import argparse
import random
import threading
from datetime import datetime
from typing import Callable, Sequence

from .alerts import WarningChecker
from .bolus import BgSource, BolusForm, InvalidInputError
from .cgm import CgmSimulator
from .profile_editor import Ask, ProfileEditor
from .profiles import UserProfileManager
from .pump import PumpController
from .records import HistoryManager
from .safety import BolusSafetyError, BolusSafetyManager
from .views import (
    ALERT_HEADERS,
    HISTORY_HEADERS,
    alert_rows,
    format_table,
    history_rows,
)

WINDOW_TITLE = "t:slim X2 Pump Simulation"
DEFAULT_BATTERY_LEVEL = 8
DEFAULT_INSULIN_LEVEL = 4.0
WARNING_EVERY_TICKS = 30

HELP_TEXT = """Commands:
  status                    show time, battery, insulin and BG
  tick [N]                  advance the simulation N steps (default 1)
  bg manual|cgm             choose where the bolus BG comes from
  calc CARBS IOB [BG]       calculate the suggested bolus
  deliver [PERCENT [HOURS]] deliver the suggested bolus, optionally extended
  profiles                  list profiles
  profile add               add a profile
  profile edit N            edit profile N
  profile delete N          delete profile N
  profile use N             activate profile N
  history                   show the history log
  alerts                    show pump warnings
  graph                     show the visible CGM points
  help                      show this text
  quit                      leave"""

SAFETY_FAILED = "Cannot deliver bolus due to pump safety constraints."


class PumpApp:
    """The pump simulation with a text command interface."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        now: Callable[[], datetime] = datetime.now,
        ask: Ask | None = None,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        tick_interval: float = 1.0,
        warning_every: int = WARNING_EVERY_TICKS,
        battery_level: int = DEFAULT_BATTERY_LEVEL,
        insulin_level: float = DEFAULT_INSULIN_LEVEL,
    ) -> None:
        self._now = now
        self._input = input_fn
        self._output = output
        self.tick_interval = tick_interval
        self.warning_every = warning_every
        self._lock = threading.RLock()
        self._ticks = 0
        self.running = False

        self.profiles = UserProfileManager()
        self.safety = BolusSafetyManager()
        self.history = HistoryManager()
        self.cgm = CgmSimulator(rng=rng)
        self.pump = PumpController(self.profiles, self.history, self.safety, self.cgm)
        self.warnings = WarningChecker(
            self.history,
            self.cgm,
            notify=self._notify,
            battery_level=battery_level,
            insulin_level=insulin_level,
        )
        from .views import CgmGraph

        self.graph = CgmGraph(self.cgm)
        self.bolus_form = BolusForm(self.profiles, self.pump, self.cgm)
        self.profile_editor = ProfileEditor(self.profiles, ask=ask, notify=self._notify)

    def _notify(self, title: str, text: str) -> None:
        self._output(f"{title}: {text}")

    def status_text(self) -> str:
        """Clock, battery, reservoir and current BG as display text."""
        stamp = self._now().strftime("%I:%M %p\n%a, %d %b")
        return (
            f"{stamp}\n"
            f"Battery: {self.warnings.battery_level}%\n"
            f"Insulin: {self.warnings.insulin_level:.0f}U\n"
            f"BG: {self.cgm.current_bg:.1f} mmol/L (sim {self.cgm.sim_time_str})"
        )

    def tick(self) -> float:
        """Advance one step; warnings are checked every warning_every steps."""
        with self._lock:
            bg = self.cgm.tick()
            self._ticks += 1
            if self.warning_every > 0 and self._ticks % self.warning_every == 0:
                self.warnings.check()
            return bg

    def handle(self, command: str) -> str:
        """Run one text command and return the reply."""
        parts = command.split()
        if not parts:
            return ""
        name, args = parts[0].lower(), parts[1:]
        handlers: dict[str, Callable[[list[str]], str]] = {
            "status": lambda _: self.status_text(),
            "tick": self._cmd_tick,
            "bg": self._cmd_bg,
            "calc": self._cmd_calc,
            "deliver": self._cmd_deliver,
            "profiles": lambda _: self._list_profiles(),
            "profile": self._cmd_profile,
            "history": lambda _: format_table(
                HISTORY_HEADERS, history_rows(self.history.records)
            ),
            "alerts": lambda _: format_table(
                ALERT_HEADERS, alert_rows(self.history.records)
            ),
            "graph": lambda _: self._graph_text(),
            "help": lambda _: HELP_TEXT,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }
        handler = handlers.get(name)
        if handler is None:
            return f"Unknown command: {name}. Type 'help' for commands."
        with self._lock:
            return handler(args)

    def _cmd_quit(self, args: list[str]) -> str:
        self.running = False
        return ""

    def _cmd_tick(self, args: list[str]) -> str:
        try:
            count = int(args[0]) if args else 1
        except ValueError:
            return "Usage: tick [N]"
        if count < 1:
            return "Usage: tick [N]"
        for _ in range(count):
            self.tick()
        return f"BG: {self.cgm.current_bg:.1f} mmol/L (sim {self.cgm.sim_time_str})"

    def _cmd_bg(self, args: list[str]) -> str:
        try:
            source = BgSource(args[0].lower()) if len(args) == 1 else None
        except ValueError:
            source = None
        if source is None:
            return "Usage: bg manual|cgm"
        self.bolus_form.set_bg_source(source)
        return f"BG source: {source.value}; BG={self.bolus_form.bg_text or '-'}"

    def _cmd_calc(self, args: list[str]) -> str:
        if len(args) not in (2, 3):
            return "Usage: calc CARBS IOB [BG]"
        form = self.bolus_form
        form.carbs_text, form.iob_text = args[0], args[1]
        if len(args) == 3 and form.bg_editable:
            form.bg_text = args[2]
        try:
            form.calculate()
        except InvalidInputError as exc:
            return f"Invalid Input: {exc}"
        return f"Suggested Bolus (U): {form.suggested_text}"

    def _cmd_deliver(self, args: list[str]) -> str:
        form = self.bolus_form
        if len(args) > 2:
            return "Usage: deliver [PERCENT [HOURS]]"
        try:
            if args:
                form.extended_percent = int(args[0])
                if len(args) == 2:
                    form.extended_hours = int(args[1])
            form.extended = bool(args)
        except ValueError as exc:
            return f"Invalid Input: {exc}"
        try:
            total = form.deliver()
        except InvalidInputError as exc:
            return f"Error: {exc}"
        except BolusSafetyError as exc:
            return f"Safety Check Failed: {SAFETY_FAILED} ({exc})"
        if total <= 0:
            return "Bolus: Bolus is 0U. Nothing to deliver."
        return f"Bolus Delivered: Delivered: {total:g} U"

    def _list_profiles(self) -> str:
        active = self.profiles.active_profile
        lines = [
            f"{'*' if p == active else ' '} {i}: {p.name}"
            for i, p in enumerate(self.profiles.profiles)
        ]
        return "\n".join(lines) if lines else "No profiles."

    def _cmd_profile(self, args: list[str]) -> str:
        usage = "Usage: profile add | profile edit|delete|use N"
        if not args:
            return usage
        action = args[0].lower()
        editor = self.profile_editor
        if action == "add" and len(args) == 1:
            added = editor.add_profile()
            return f"Added profile '{added.name}'." if added else "Cancelled."
        if action not in ("edit", "delete", "use") or len(args) != 2:
            return usage
        try:
            index = int(args[1])
        except ValueError:
            return usage
        if action == "edit":
            edited = editor.edit_profile(index)
            return f"Updated profile '{edited.name}'." if edited else "No change."
        if action == "delete":
            return "Deleted." if editor.delete_profile(index) else "No such profile."
        activated = editor.activate(index)
        return "" if activated else "No such profile."

    def _graph_text(self) -> str:
        low, high = self.graph.x_range
        lines = [f"BG Graph: {low:g}..{high:g} s"]
        lines.extend(f"{t:>4}  {bg:.1f}" for t, bg in self.graph.visible_points())
        return "\n".join(lines)

    def run(self) -> None:
        """Tick in the background and serve commands until quit or end of input."""
        stop = threading.Event()
        thread: threading.Thread | None = None
        if self.tick_interval > 0:

            def ticker() -> None:
                while not stop.wait(self.tick_interval):
                    self.tick()

            thread = threading.Thread(target=ticker, daemon=True)
            thread.start()

        self.running = True
        self._output(WINDOW_TITLE)
        self._output(self.status_text())
        try:
            while self.running:
                try:
                    line = self._input("> ")
                except EOFError:
                    break
                reply = self.handle(line)
                if reply:
                    self._output(reply)
        finally:
            self.running = False
            stop.set()
            if thread is not None:
                thread.join()


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive pump simulation."""
    parser = argparse.ArgumentParser(prog="pumpsim", description=WINDOW_TITLE)
    parser.add_argument("--seed", type=int, default=None, help="random seed for the CGM")
    parser.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="seconds between simulation steps (0 disables automatic ticking)",
    )
    args = parser.parse_args(argv)
    rng = random.Random(args.seed) if args.seed is not None else None
    PumpApp(rng=rng, tick_interval=args.interval).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())