"""Tests for the Monte Carlo throughput forecaster."""

from __future__ import annotations

from datetime import date, timedelta

import numpy as np
import pytest

from cycle_time_analyzer import run_monte_carlo
from cycle_time_analyzer.config import ForecastSettings
from cycle_time_analyzer.forecast import MonteCarloForecaster
from cycle_time_analyzer.throughput import DailyThroughput


def history(counts):
    start = date(2024, 1, 1)
    return [DailyThroughput(start + timedelta(days=i), c) for i, c in enumerate(counts)]


@pytest.mark.parametrize("simulations", [1000, 5000])
def test_constant_throughput_gives_constant_totals(simulations: int) -> None:
    result = run_monte_carlo(history([3, 3, 3, 3]), simulations, 10, random_source=1)

    assert result.simulation_count == simulations
    assert result.p50 == result.p85 == result.p95 == 30
    assert (result.min, result.max, result.mean) == (30, 30, 30.0)
    assert result.histogram == {30: simulations}


def test_same_seed_reproduces_results() -> None:
    daily = history([0, 2, 1, 0, 4, 3, 0])

    first = run_monte_carlo(daily, 2000, 14, random_source=42)
    second = run_monte_carlo(daily, 2000, 14, random_source=np.random.default_rng(42))

    assert first == second
    assert np.array_equal(first.totals, second.totals)


def test_confidence_levels_read_from_the_low_end() -> None:
    """85% confidence is the value 85% of trials reached: the 15th percentile."""

    totals = np.arange(100)

    assert MonteCarloForecaster.confidence_threshold(totals, 50) == 50
    assert MonteCarloForecaster.confidence_threshold(totals, 85) == 15
    assert MonteCarloForecaster.confidence_threshold(totals, 95) == 5
    assert MonteCarloForecaster.confidence_threshold(totals, 0) == 99
    assert MonteCarloForecaster.confidence_threshold(np.array([]), 85) == 0


def test_thresholds_are_ordered_and_histogram_complete() -> None:
    result = run_monte_carlo(history([0, 1, 0, 2, 5, 0, 1, 1]), 4000, 20, random_source=7)

    assert result.min <= result.p95 <= result.p85 <= result.p50 <= result.max
    assert sum(result.histogram.values()) == 4000
    assert list(result.histogram) == sorted(result.histogram)
    assert result.p85 == result.threshold(85)
    assert np.all(np.diff(result.totals) >= 0)


def test_zero_days_pull_the_forecast_down() -> None:
    busy = run_monte_carlo(history([2, 2]), 1000, 10, random_source=3)
    sparse = run_monte_carlo(history([2, 0, 0, 0, 0, 0]), 1000, 10, random_source=3)

    assert sparse.mean < busy.mean
    assert sparse.mean == pytest.approx(10 * 2 / 6, rel=0.1)


def test_more_simulations_keep_mean_and_narrow_spread() -> None:
    daily = history([0, 1, 3, 0, 2, 6, 1, 0, 4])
    expected = 30 * np.mean([d.count for d in daily])

    small = [run_monte_carlo(daily, 1000, 30, random_source=seed).mean for seed in range(15)]
    large = [run_monte_carlo(daily, 20000, 30, random_source=100 + seed).mean for seed in range(15)]

    assert np.mean(small) == pytest.approx(expected, rel=0.02)
    assert np.mean(large) == pytest.approx(expected, rel=0.02)
    assert np.std(large) < np.std(small)


def test_empty_history_runs_no_simulations() -> None:
    result = run_monte_carlo([], 10000, 14, random_source=0)

    assert result.simulation_count == 0
    assert (result.p50, result.p85, result.p95, result.mean, result.min, result.max) == (0, 0, 0, 0.0, 0, 0)
    assert result.histogram == {}
    assert result.totals.size == 0


def test_out_of_range_parameters_are_clamped() -> None:
    result = run_monte_carlo(history([1]), 5, 1000, random_source=0)

    assert result.simulation_count == 1000
    assert result.forecast_horizon_days == 365
    assert result.p50 == 365


def test_settings_clamp_both_ways() -> None:
    assert ForecastSettings(500000, 0).clamped() == ForecastSettings(100000, 1)
    assert ForecastSettings(2000, 30).clamped() == ForecastSettings(2000, 30)


def test_batched_simulation_matches_requested_count() -> None:
    settings = ForecastSettings(simulation_count=25000, forecast_horizon_days=365)

    totals = MonteCarloForecaster.simulate(np.array([0, 1]), settings, np.random.default_rng(0))

    assert totals.shape == (25000,)
    assert totals.min() >= 0 and totals.max() <= 365


@pytest.mark.parametrize(
    ("settings", "expected"),
    [
        (ForecastSettings(float("inf"), float("inf")), ForecastSettings(100000, 365)),
        (ForecastSettings(float("-inf"), float("-inf")), ForecastSettings(1000, 1)),
        (ForecastSettings(float("nan"), float("nan")), ForecastSettings(10000, 14)),
    ],
)
def test_non_finite_settings_are_clamped_not_rejected(settings: ForecastSettings, expected: ForecastSettings) -> None:
    assert settings.clamped() == expected


def test_non_finite_parameters_still_run() -> None:
    result = run_monte_carlo(history([2]), float("nan"), float("-inf"), random_source=0)

    assert result.simulation_count == 10000
    assert result.forecast_horizon_days == 1
    assert result.p50 == 2
