"""Shewhart Individuals / Moving-Range (XmR) analysis of cycle times.

Limits follow the usual XmR constants: the natural process limits sit
2.66 average moving ranges either side of the mean, and the moving-range
chart's upper limit is 3.27 average moving ranges (D4 for subgroups of 2).
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

import numpy as np

from .config import Config
from .work_items import WorkItem, chronological

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControlLimits:
    central_line: float = 0.0
    upper_limit: float = 0.0
    lower_limit: float = 0.0
    average_moving_range: float = 0.0

    @property
    def moving_range_upper_limit(self) -> float:
        return Config.MOVING_RANGE_MULTIPLIER * self.average_moving_range


@dataclass(frozen=True)
class BehaviourPoint:
    sequence: int
    value: float
    moving_range: Optional[float]
    is_special_cause: bool
    item_id: Optional[str] = None
    completed_on: Optional[date] = None


@dataclass(frozen=True)
class MovingRangePoint:
    sequence: int
    moving_range: float


@dataclass(frozen=True)
class ProcessBehaviourResult:
    points: List[BehaviourPoint] = field(default_factory=list)
    control_limits: ControlLimits = field(default_factory=ControlLimits)
    moving_ranges: List[MovingRangePoint] = field(default_factory=list)

    @property
    def special_cause_count(self) -> int:
        return sum(1 for p in self.points if p.is_special_cause)


class ProcessBehaviourAnalyzer:
    @staticmethod
    def analyze(values: Sequence[float]) -> ProcessBehaviourResult:
        """XmR analysis of values already in chronological order."""
        if len(values) == 0: return ProcessBehaviourResult()
        arr = np.asarray(values, dtype=float)
        moving_ranges = np.abs(np.diff(arr))
        limits = ProcessBehaviourAnalyzer.control_limits(arr, moving_ranges)
        points = [
            BehaviourPoint(
                sequence=i + 1,
                value=float(value),
                moving_range=float(moving_ranges[i - 1]) if i > 0 else None,
                is_special_cause=bool(value > limits.upper_limit or value < limits.lower_limit),
            )
            for i, value in enumerate(arr)
        ]
        mr_points = [MovingRangePoint(sequence=i + 2, moving_range=float(mr)) for i, mr in enumerate(moving_ranges)]
        return ProcessBehaviourResult(points=points, control_limits=limits, moving_ranges=mr_points)

    @staticmethod
    def control_limits(values: np.ndarray, moving_ranges: np.ndarray) -> ControlLimits:
        central = float(np.mean(values))
        avg_mr = float(moving_ranges.mean()) if moving_ranges.size else 0.0
        spread = Config.INDIVIDUALS_MULTIPLIER * avg_mr
        return ControlLimits(central_line=central, upper_limit=central + spread, lower_limit=max(0.0, central - spread), average_moving_range=avg_mr)

    @staticmethod
    def analyze_work_items(items: Sequence[WorkItem]) -> ProcessBehaviourResult:
        ordered = [item for item in chronological(items) if item.cycle_time_days > 0]
        result = ProcessBehaviourAnalyzer.analyze([item.cycle_time_days for item in ordered])
        points = [
            BehaviourPoint(p.sequence, p.value, p.moving_range, p.is_special_cause, item.id, item.completed_on)
            for p, item in zip(result.points, ordered)
        ]
        if result.special_cause_count:
            logger.info("%d of %d items show special cause variation", result.special_cause_count, len(points))
        return ProcessBehaviourResult(points=points, control_limits=result.control_limits, moving_ranges=result.moving_ranges)
