"""Tabular views of the pump history and a scrolling CGM graph model."""

from __future__ import annotations

from typing import Iterable, Sequence

from .cgm import CgmSimulator
from .records import BolusRecord, HistoryRecord, RecordType

HISTORY_HEADERS = ("Time", "Type", "Amount (U)", "Notes")
ALERT_HEADERS = ("Time", "Message")
BOLUS_HISTORY_HEADERS = ("Amount (U)", "Notes")

_TYPE_LABELS = {
    RecordType.MANUAL_BOLUS: "Manual Bolus",
    RecordType.AUTO_BOLUS: "Auto Bolus",
    RecordType.CGM_READING: "CGM Reading",
    RecordType.WARNING: "Warning",
    RecordType.OTHER: "Other",
}

RANGE_OPTIONS = (("1h (12s)", 12), ("3h (36s)", 36), ("6h (72s)", 72))


def history_rows(records: Iterable[HistoryRecord]) -> list[tuple[str, str, str, str]]:
    """Rows of time, type, amount and notes; non-positive amounts show as '-'."""
    return [
        (
            rec.timestamp,
            _TYPE_LABELS.get(rec.record_type, "Other"),
            f"{rec.insulin_amount:.2f}" if rec.insulin_amount > 0 else "-",
            rec.notes,
        )
        for rec in records
    ]


def alert_rows(records: Iterable[HistoryRecord]) -> list[tuple[str, str]]:
    """Rows of time and message for warning records only."""
    return [
        (rec.timestamp, rec.notes)
        for rec in records
        if rec.record_type is RecordType.WARNING
    ]


def bolus_history_rows(records: Iterable[BolusRecord]) -> list[tuple[str, str]]:
    """Rows of amount and notes for bolus records."""
    return [(f"{rec.amount:.6g}", rec.notes) for rec in records]


def format_table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """Render headers and rows as aligned plain text; the last column is not padded."""
    body = [[str(cell) for cell in row] for row in rows]
    header = [str(h) for h in headers]
    widths = [len(h) for h in header]
    for row in body:
        for col, cell in enumerate(row[: len(widths)]):
            widths[col] = max(widths[col], len(cell))

    def render(cells: Sequence[str]) -> str:
        padded = [
            cell if col == len(widths) - 1 else cell.ljust(widths[col])
            for col, cell in enumerate(cells)
        ]
        return "  ".join(padded).rstrip()

    lines = [render(header), "  ".join("-" * w for w in widths)]
    lines.extend(render(row) for row in body)
    return "\n".join(lines)


class CgmGraph:
    """Time series of CGM readings with an auto-scrolling X window."""

    def __init__(self, cgm: CgmSimulator | None = None) -> None:
        self.x_min = 0.0
        self.x_max = 60.0
        self.y_min = 2.0
        self.y_max = 16.0
        self.time_counter = 0
        self.points: list[tuple[int, float]] = []
        if cgm is not None:
            cgm.subscribe(self.update)

    @property
    def x_range(self) -> tuple[float, float]:
        """Visible X window (seconds)."""
        return (self.x_min, self.x_max)

    def update(self, bg: float) -> None:
        """Append a reading one second after the last and scroll if needed."""
        self.time_counter += 1
        self.points.append((self.time_counter, bg))
        if self.time_counter > self.x_max:
            size = self.x_max - self.x_min
            self.x_min = self.time_counter - size
            self.x_max = float(self.time_counter)

    def set_range(self, index: int) -> None:
        """Show the first N seconds for the range option at index."""
        if not 0 <= index < len(RANGE_OPTIONS):
            raise IndexError(f"no range option {index}")
        _, seconds = RANGE_OPTIONS[index]
        self.x_min = 0.0
        self.x_max = float(seconds)

    def visible_points(self) -> list[tuple[int, float]]:
        """Points that fall inside the current X window."""
        return [p for p in self.points if self.x_min <= p[0] <= self.x_max]