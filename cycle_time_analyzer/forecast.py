"""Monte Carlo "how many" forecasting from historical daily throughput.

Each trial sums ``forecast_horizon_days`` draws, with replacement, from the
zero-filled daily throughput history. Confidence levels read the sorted
totals from the bottom: "85% confidence of at least V items" is the value
that 85% of trials met or exceeded, i.e. the 15th percentile.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Sequence, Union

import numpy as np

from .config import Config, ForecastSettings
from .throughput import DailyThroughput

logger = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.Generator]


@dataclass(frozen=True)
class ForecastResult:
    simulation_count: int = 0
    forecast_horizon_days: int = 0
    p50: int = 0
    p85: int = 0
    p95: int = 0
    mean: float = 0.0
    min: int = 0
    max: int = 0
    histogram: Dict[int, int] = field(default_factory=dict)
    totals: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64), repr=False, compare=False)

    def threshold(self, confidence: int) -> int:
        return MonteCarloForecaster.confidence_threshold(self.totals, confidence)


class MonteCarloForecaster:
    @staticmethod
    def run(daily: Sequence[DailyThroughput], settings: ForecastSettings = ForecastSettings(), random_source: RandomSource = None) -> ForecastResult:
        counts = np.array([d.count for d in daily], dtype=np.int64)
        settings = settings.clamped()
        if counts.size == 0:
            logger.warning("No throughput history; skipping simulation")
            return ForecastResult(forecast_horizon_days=settings.forecast_horizon_days)
        rng = np.random.default_rng(random_source)
        totals = MonteCarloForecaster.simulate(counts, settings, rng)
        values, occurrences = np.unique(totals, return_counts=True)
        return ForecastResult(
            simulation_count=settings.simulation_count,
            forecast_horizon_days=settings.forecast_horizon_days,
            p50=MonteCarloForecaster.confidence_threshold(totals, 50),
            p85=MonteCarloForecaster.confidence_threshold(totals, 85),
            p95=MonteCarloForecaster.confidence_threshold(totals, 95),
            mean=float(totals.mean()),
            min=int(totals[0]),
            max=int(totals[-1]),
            histogram={int(v): int(n) for v, n in zip(values, occurrences)},
            totals=totals,
        )

    @staticmethod
    def simulate(counts: np.ndarray, settings: ForecastSettings, rng: np.random.Generator) -> np.ndarray:
        """Sorted trial totals. Trials are drawn in batches to bound memory."""
        horizon = settings.forecast_horizon_days
        batch = max(1, Config.SIMULATION_BATCH_DRAWS // horizon)
        totals = np.empty(settings.simulation_count, dtype=np.int64)
        for start in range(0, settings.simulation_count, batch):
            rows = min(batch, settings.simulation_count - start)
            totals[start:start + rows] = rng.choice(counts, size=(rows, horizon), replace=True).sum(axis=1)
        totals.sort()
        return totals

    @staticmethod
    def confidence_threshold(sorted_totals: np.ndarray, confidence: int) -> int:
        n = len(sorted_totals)
        if n == 0: return 0
        index = min(max(int(n * (100 - confidence) // 100), 0), n - 1)
        return int(sorted_totals[index])
