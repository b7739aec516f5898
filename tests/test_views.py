import pytest

from pumpsim.cgm import CgmSimulator
from pumpsim.records import BolusRecord, HistoryRecord, RecordType
from pumpsim.views import (
    ALERT_HEADERS,
    HISTORY_HEADERS,
    RANGE_OPTIONS,
    CgmGraph,
    alert_rows,
    bolus_history_rows,
    format_table,
    history_rows,
)


class _FlatRng:
    def randrange(self, stop):
        return 10


def _records():
    return [
        HistoryRecord("00:05", RecordType.MANUAL_BOLUS, 2.5, "meal"),
        HistoryRecord("00:10", RecordType.CGM_READING, 0.0, "BG= 7.0 mmol/L"),
        HistoryRecord("00:15", RecordType.WARNING, 0.0, "Battery low!"),
        HistoryRecord("00:20", RecordType.AUTO_BOLUS, 1.0, "auto"),
        HistoryRecord("00:25", RecordType.OTHER, 0.0, "basal"),
    ]


def test_history_rows_type_labels():
    rows = history_rows(_records())
    assert [r[1] for r in rows] == [
        "Manual Bolus",
        "CGM Reading",
        "Warning",
        "Auto Bolus",
        "Other",
    ]


def test_history_rows_amounts_and_dash():
    rows = history_rows(_records())
    assert rows[0][2] == "2.50"
    assert rows[1][2] == "-"
    assert rows[0][0] == "00:05"
    assert rows[0][3] == "meal"


def test_alert_rows_only_warnings():
    rows = alert_rows(_records())
    assert rows == [("00:15", "Battery low!")]


def test_alert_rows_empty():
    assert alert_rows([]) == []


def test_bolus_history_rows():
    rows = bolus_history_rows([BolusRecord(3.0, "x"), BolusRecord(1.25, "y")])
    assert rows == [("3", "x"), ("1.25", "y")]


def test_format_table_structure():
    rows = history_rows(_records())
    text = format_table(HISTORY_HEADERS, rows)
    lines = text.splitlines()
    assert len(lines) == len(rows) + 2
    assert lines[0].startswith("Time")
    assert set(lines[1].replace(" ", "")) == {"-"}
    for line, row in zip(lines[2:], rows):
        for cell in row:
            assert cell in line


def test_format_table_columns_aligned():
    text = format_table(ALERT_HEADERS, [("a", "first"), ("longer time", "second")])
    lines = text.splitlines()
    positions = {line.index(word) for line, word in zip(lines[2:], ["first", "second"])}
    assert len(positions) == 1
    assert lines[0].index("Message") in positions


def test_graph_initial_range():
    graph = CgmGraph()
    assert graph.x_range == (0.0, 60.0)
    assert graph.visible_points() == []


def test_graph_update_appends_points():
    graph = CgmGraph()
    graph.update(7.0)
    graph.update(7.2)
    assert graph.points == [(1, 7.0), (2, 7.2)]
    assert graph.visible_points() == graph.points


def test_graph_scrolls_keeping_width():
    graph = CgmGraph()
    for _ in range(75):
        graph.update(6.0)
    assert graph.x_max == graph.time_counter
    assert graph.x_max - graph.x_min == 60.0
    assert all(graph.x_min <= x <= graph.x_max for x, _ in graph.visible_points())
    assert len(graph.visible_points()) < len(graph.points)


def test_graph_set_range():
    graph = CgmGraph()
    graph.set_range(1)
    assert graph.x_range == (0.0, float(RANGE_OPTIONS[1][1]))
    assert RANGE_OPTIONS[1][1] == 36


@pytest.mark.parametrize("index", [-1, 3])
def test_graph_set_range_invalid(index):
    with pytest.raises(IndexError):
        CgmGraph().set_range(index)


def test_graph_follows_cgm():
    cgm = CgmSimulator(rng=_FlatRng())
    graph = CgmGraph(cgm)
    cgm.tick()
    cgm.tick()
    assert graph.points == [(1, 7.0), (2, 7.0)]