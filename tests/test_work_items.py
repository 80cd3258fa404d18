"""Tests for turning raw rows into WorkItems."""

from __future__ import annotations

from datetime import date

from cycle_time_analyzer import parse_work_items, resolve_columns
from cycle_time_analyzer.columns import ResolvedColumns
from cycle_time_analyzer.work_items import chronological


def test_invalid_rows_are_dropped(export_rows) -> None:
    """Rows with an unparsable end date or cycle time never become items."""

    items = parse_work_items(export_rows, resolve_columns(list(export_rows[0])))

    assert [item.id for item in items] == ["DF-1", "DF-2", "DF-3", "DF-5"]
    assert items[3].completed_on == date(2024, 3, 8)
    assert items[3].estimate is None
    assert items[0].estimate == 3.0
    assert items[2].cycle_time_days == 7.0


def test_unresolvable_schema_yields_no_items(export_rows) -> None:
    assert parse_work_items(export_rows, ResolvedColumns(id_key="ID")) == []


def test_negative_cycle_time_is_dropped() -> None:
    rows = [{"End": "01/02/2024", "CT": "-1"}, {"End": "02/02/2024", "CT": "0"}]

    items = parse_work_items(rows, resolve_columns(["End", "CT"]))

    assert [item.cycle_time_days for item in items] == [0.0]


def test_missing_id_column_gets_positional_ids() -> None:
    rows = [{"End": "01/02/2024", "CT": 2}, {"End": "02/02/2024", "CT": 3}]

    items = parse_work_items(rows, resolve_columns(["End", "CT"]))

    assert [item.id for item in items] == ["Item-0", "Item-1"]


def test_chronological_is_stable(make_item) -> None:
    items = [make_item("b", 5, 1), make_item("a", 2, 1), make_item("c", 5, 1)]

    assert [item.id for item in chronological(items)] == ["a", "b", "c"]
