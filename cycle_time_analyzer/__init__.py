"""Statistical engine for agile delivery forecasting from completed work items."""
from typing import Any, List, Mapping, Optional, Sequence

from .analysis import DatasetAnalysis, analyze_dataset
from .columns import ColumnResolver, ResolvedColumns
from .config import Config, ForecastSettings
from .correlation import CorrelationAggregator, CorrelationResult
from .dates import DateNormalizer
from .forecast import ForecastResult, MonteCarloForecaster, RandomSource
from .process_behaviour import ControlLimits, ProcessBehaviourAnalyzer, ProcessBehaviourResult
from .statistics import StatsCalculator
from .throughput import DailyThroughput, ThroughputAggregator
from .work_items import WorkItem, WorkItemParser


def resolve_columns(headers: Sequence[str], rows: Optional[Sequence[Mapping[str, Any]]] = None) -> ResolvedColumns:
    return ColumnResolver.resolve(headers, rows)


def parse_work_items(rows: Sequence[Mapping[str, Any]], columns: ResolvedColumns) -> List[WorkItem]:
    return WorkItemParser.parse(rows, columns)


def compute_percentile(sorted_values: Sequence[float], p: float) -> float:
    return StatsCalculator.percentile(sorted_values, p)


def analyze_process_behaviour(cycle_times: Sequence[float]) -> ProcessBehaviourResult:
    return ProcessBehaviourAnalyzer.analyze(cycle_times)


def aggregate_correlation(work_items: Sequence[WorkItem]) -> CorrelationResult:
    return CorrelationAggregator.aggregate(work_items)


def build_daily_throughput(work_items: Sequence[WorkItem]) -> List[DailyThroughput]:
    return ThroughputAggregator.build(work_items)


def run_monte_carlo(daily_throughput: Sequence[DailyThroughput], simulation_count: int = Config.DEFAULT_SIMULATIONS, forecast_horizon_days: int = Config.DEFAULT_FORECAST_HORIZON, random_source: RandomSource = None) -> ForecastResult:
    settings = ForecastSettings(simulation_count=simulation_count, forecast_horizon_days=forecast_horizon_days)
    return MonteCarloForecaster.run(daily_throughput, settings, random_source)


__all__ = [
    'Config', 'ControlLimits', 'DailyThroughput', 'DatasetAnalysis', 'DateNormalizer', 'ForecastResult',
    'ForecastSettings', 'ResolvedColumns', 'WorkItem', 'aggregate_correlation', 'analyze_dataset',
    'analyze_process_behaviour', 'build_daily_throughput', 'compute_percentile', 'parse_work_items',
    'resolve_columns', 'run_monte_carlo',
]
