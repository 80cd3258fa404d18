"""End-to-end tests: CSV text through every analysis."""

from __future__ import annotations

import io

import pytest

from cycle_time_analyzer import analyze_dataset
from cycle_time_analyzer.config import ForecastSettings
from cycle_time_analyzer.loader import load_frame, load_rows

CSV = """ID,Start,End,CT,Estimate
DF-1,01/03/2024,04/03/2024,4,3
DF-2,02/03/2024,04/03/2024,3,3
DF-3,01/03/2024,07/03/2024,7,5
DF-4,05/03/2024,not a date,2,1
,,,,
DF-5,06/03/2024,08-03-2024,3,
"""


def test_load_rows_keeps_raw_strings_and_skips_blank_lines() -> None:
    rows = load_rows(io.StringIO(CSV))

    assert len(rows) == 5
    assert rows[0] == {"ID": "DF-1", "Start": "01/03/2024", "End": "04/03/2024", "CT": "4", "Estimate": "3"}
    assert rows[-1]["Estimate"] == ""


def test_load_falls_back_to_latin1() -> None:
    data = "ID,End,CT\nCAFÉ-1,01/02/2024,2\n".encode("latin1")

    df = load_frame(io.BytesIO(data))

    assert df is not None
    assert df.loc[0, "ID"] == "CAFÉ-1"


def test_unreadable_input_returns_none() -> None:
    assert load_rows(io.StringIO("")) is None


def test_full_pipeline(export_rows) -> None:
    analysis = analyze_dataset(export_rows, ForecastSettings(1000, 5), random_source=11)

    assert analysis.columns.has_usable_data
    assert [item.id for item in analysis.items] == ["DF-1", "DF-2", "DF-3", "DF-5"]
    assert analysis.cycle_time.summary.count == 4
    assert analysis.cycle_time.summary.p85 == pytest.approx(5.65)
    assert [d.count for d in analysis.daily_throughput] == [2, 0, 0, 1, 1]
    assert analysis.throughput_summary.limited_history
    assert analysis.process_behaviour.control_limits.central_line == pytest.approx(4.25)
    assert [g.estimate for g in analysis.correlation.groups] == [3, 5]
    assert analysis.forecast.simulation_count == 1000
    assert 0 <= analysis.forecast.p95 <= analysis.forecast.p50 <= 10


def test_pipeline_from_csv_text() -> None:
    rows = load_rows(io.StringIO(CSV))

    analysis = analyze_dataset(rows, ForecastSettings(1000, 5), random_source=0)

    assert len(analysis.items) == 4
    assert analysis.correlation.total_items == 3


def test_unusable_schema_gives_empty_results() -> None:
    rows = [{"Summary": "Fix login", "Owner": "sam"}, {"Summary": "Add search", "Owner": "kim"}]

    analysis = analyze_dataset(rows, random_source=0)

    assert not analysis.columns.has_usable_data
    assert analysis.items == []
    assert analysis.daily_throughput == []
    assert analysis.cycle_time.summary.count == 0
    assert analysis.process_behaviour.points == []
    assert analysis.correlation.groups == []
    assert analysis.forecast.simulation_count == 0
