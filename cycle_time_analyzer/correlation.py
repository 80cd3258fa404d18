import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.linear_model import LinearRegression

from .config import Config
from .work_items import WorkItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationGroup:
    estimate: int
    min_cycle_time: float
    max_cycle_time: float
    avg_cycle_time: float
    count: int
    members: List[Tuple[str, float]]


@dataclass(frozen=True)
class TrendLine:
    slope: float
    intercept: float
    r2: float


@dataclass(frozen=True)
class CorrelationResult:
    groups: List[CorrelationGroup] = field(default_factory=list)
    total_items: int = 0
    unique_estimates: int = 0
    estimate_range: str = 'N/A'
    trend: Optional[TrendLine] = None


class CorrelationAggregator:
    """Bands cycle times by estimate to show how well estimates predict delivery time."""

    @staticmethod
    def aggregate(items: Sequence[WorkItem]) -> CorrelationResult:
        grouped: Dict[int, List[Tuple[str, float]]] = defaultdict(list)
        for item in items:
            if item.estimate is None or not math.isfinite(item.estimate): continue
            if not math.isfinite(item.cycle_time_days) or item.cycle_time_days <= 0: continue
            estimate = int(item.estimate)
            if estimate <= 0: continue
            grouped[estimate].append((item.id, item.cycle_time_days))
        if not grouped:
            logger.info("No items with both a positive estimate and cycle time")
            return CorrelationResult()

        groups = []
        for estimate in sorted(grouped):
            members = grouped[estimate]
            cycle_times = [ct for _, ct in members]
            groups.append(CorrelationGroup(
                estimate=estimate,
                min_cycle_time=min(cycle_times),
                max_cycle_time=max(cycle_times),
                avg_cycle_time=sum(cycle_times) / len(cycle_times),
                count=len(members),
                members=members,
            ))
        return CorrelationResult(
            groups=groups,
            total_items=sum(g.count for g in groups),
            unique_estimates=len(groups),
            estimate_range=f"{groups[0].estimate} - {groups[-1].estimate}",
            trend=CorrelationAggregator._fit_trend(groups),
        )

    @staticmethod
    def _fit_trend(groups: Sequence[CorrelationGroup]) -> Optional[TrendLine]:
        pairs = [(g.estimate, ct) for g in groups for _, ct in g.members]
        if len(pairs) < Config.MIN_TREND_ITEMS or len(groups) < 2: return None
        X = np.array([est for est, _ in pairs], dtype=float).reshape(-1, 1)
        y = np.array([ct for _, ct in pairs], dtype=float)
        reg = LinearRegression().fit(X, y)
        # score() is undefined for a constant target
        r2 = float(reg.score(X, y)) if y.max() > y.min() else 0.0
        return TrendLine(slope=float(reg.coef_[0]), intercept=float(reg.intercept_), r2=r2)
