import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Sequence

import numpy as np

from .config import Config
from .work_items import WorkItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyThroughput:
    date: date
    count: int


@dataclass(frozen=True)
class ThroughputSummary:
    total_days: int
    average: float
    minimum: int
    maximum: int
    limited_history: bool


class ThroughputAggregator:
    """Builds the zero-filled daily throughput series the forecaster samples from."""

    @staticmethod
    def build(items: Sequence[WorkItem]) -> List[DailyThroughput]:
        if not items: return []
        start = min(item.completed_on for item in items)
        offsets = np.fromiter(((item.completed_on - start).days for item in items), dtype=np.int64, count=len(items))
        # index i holds the count for start + i days; empty days stay zero
        counts = np.bincount(offsets)
        return [DailyThroughput(date=start + timedelta(days=i), count=int(c)) for i, c in enumerate(counts)]

    @staticmethod
    def summarize(daily: Sequence[DailyThroughput]) -> ThroughputSummary:
        if not daily: return ThroughputSummary(0, 0.0, 0, 0, True)
        counts = np.array([d.count for d in daily])
        limited = len(daily) < Config.LIMITED_HISTORY_DAYS
        if limited:
            logger.warning("Only %d days of throughput history; forecasts may be unreliable", len(daily))
        return ThroughputSummary(total_days=len(daily), average=float(counts.mean()), minimum=int(counts.min()), maximum=int(counts.max()), limited_history=limited)
