"""Shared fixtures: a small export in the shape the dashboard accepts."""

from __future__ import annotations

from datetime import date

import pytest

from cycle_time_analyzer.work_items import WorkItem


@pytest.fixture
def export_rows():
    """Rows as read from a CSV with ID, Start, End, CT and Estimate columns."""

    return [
        {"ID": "DF-1", "Start": "01/03/2024", "End": "04/03/2024", "CT": "4", "Estimate": "3"},
        {"ID": "DF-2", "Start": "02/03/2024", "End": "04/03/2024", "CT": "3", "Estimate": "3"},
        {"ID": "DF-3", "Start": "01/03/2024", "End": "07/03/2024", "CT": "7", "Estimate": "5"},
        {"ID": "DF-4", "Start": "05/03/2024", "End": "bad date", "CT": "2", "Estimate": "1"},
        {"ID": "DF-5", "Start": "06/03/2024", "End": "08-03-2024", "CT": "3", "Estimate": ""},
        {"ID": "DF-6", "Start": "06/03/2024", "End": "08/03/2024", "CT": "n/a", "Estimate": "2"},
    ]


@pytest.fixture
def make_item():
    """Build a WorkItem completed on the given day of March 2024."""

    def _make(item_id: str, day: int, cycle_time: float, estimate: float | None = None) -> WorkItem:
        return WorkItem(id=item_id, completed_on=date(2024, 3, day), cycle_time_days=cycle_time, estimate=estimate)

    return _make
