"""History records kept by the pump and the stores that hold them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class RecordType(Enum):
    """Kind of event stored in the pump history."""

    MANUAL_BOLUS = auto()
    AUTO_BOLUS = auto()
    CGM_READING = auto()
    WARNING = auto()
    OTHER = auto()


@dataclass(frozen=True)
class HistoryRecord:
    """One entry in the pump history log."""

    timestamp: str
    record_type: RecordType
    insulin_amount: float
    notes: str


class HistoryManager:
    """Append-only log of history records, oldest first."""

    def __init__(self) -> None:
        self._history: list[HistoryRecord] = []

    def add_record(self, record: HistoryRecord) -> None:
        """Append a record to the log."""
        self._history.append(record)

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        """All records in the order they were added."""
        return tuple(self._history)

    @property
    def warnings(self) -> tuple[HistoryRecord, ...]:
        """Only the warning records, in the order they were added."""
        return tuple(r for r in self._history if r.record_type is RecordType.WARNING)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(tuple(self._history))

    def __len__(self) -> int:
        return len(self._history)


@dataclass(frozen=True)
class BolusRecord:
    """A delivered bolus amount with free-text notes."""

    amount: float
    notes: str


class BolusHistoryManager:
    """Append-only log of bolus records, oldest first."""

    def __init__(self) -> None:
        self._history: list[BolusRecord] = []

    def add_record(self, record: BolusRecord) -> None:
        """Append a bolus record."""
        self._history.append(record)

    @property
    def records(self) -> tuple[BolusRecord, ...]:
        """All bolus records in the order they were added."""
        return tuple(self._history)

    def __iter__(self) -> Iterator[BolusRecord]:
        return iter(tuple(self._history))

    def __len__(self) -> int:
        return len(self._history)