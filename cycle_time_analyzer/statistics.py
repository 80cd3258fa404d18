from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import numpy as np

from .config import Config
from .work_items import WorkItem, chronological


@dataclass(frozen=True)
class DistributionSummary:
    count: int
    mean: float
    minimum: float
    maximum: float
    p85: float


@dataclass(frozen=True)
class CycleTimeAnalysis:
    items: List[WorkItem]
    summary: DistributionSummary


class StatsCalculator:
    @staticmethod
    def percentile(sorted_values: Sequence[float], p: float) -> float:
        """Linearly interpolated percentile of an ascending sample, ``p`` in [0, 1].

        An empty sample yields 0 so callers can always draw a reference line.
        """
        if len(sorted_values) == 0: return 0.0
        p = min(max(p, 0.0), 1.0)
        return float(np.percentile(sorted_values, p * 100))

    @staticmethod
    def percentiles(values: Iterable[float], levels: Sequence[int] = tuple(Config.PERCENTILES)) -> Dict[int, float]:
        ordered = sorted(values)
        return {level: StatsCalculator.percentile(ordered, level / 100) for level in levels}

    @staticmethod
    def summarize(values: Iterable[float]) -> DistributionSummary:
        ordered = np.sort(np.fromiter(values, dtype=float))
        if ordered.size == 0: return DistributionSummary(0, 0.0, 0.0, 0.0, 0.0)
        return DistributionSummary(
            count=int(ordered.size),
            mean=float(ordered.mean()),
            minimum=float(ordered[0]),
            maximum=float(ordered[-1]),
            p85=StatsCalculator.percentile(ordered, Config.CYCLE_TIME_PERCENTILE),
        )

    @staticmethod
    def analyze_cycle_times(items: Sequence[WorkItem]) -> CycleTimeAnalysis:
        completed = [item for item in chronological(items) if item.cycle_time_days > 0]
        return CycleTimeAnalysis(items=completed, summary=StatsCalculator.summarize(item.cycle_time_days for item in completed))
