import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from .columns import ColumnResolver, ResolvedColumns, headers_of
from .config import ForecastSettings
from .correlation import CorrelationAggregator, CorrelationResult
from .forecast import ForecastResult, MonteCarloForecaster, RandomSource
from .process_behaviour import ProcessBehaviourAnalyzer, ProcessBehaviourResult
from .statistics import CycleTimeAnalysis, StatsCalculator
from .throughput import DailyThroughput, ThroughputAggregator, ThroughputSummary
from .work_items import WorkItem, WorkItemParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetAnalysis:
    columns: ResolvedColumns
    items: List[WorkItem]
    cycle_time: CycleTimeAnalysis
    process_behaviour: ProcessBehaviourResult
    correlation: CorrelationResult
    daily_throughput: List[DailyThroughput]
    throughput_summary: ThroughputSummary
    forecast: ForecastResult


def analyze_dataset(rows: Sequence[Mapping[str, Any]], settings: ForecastSettings = ForecastSettings(), random_source: RandomSource = None, headers: Optional[Sequence[str]] = None) -> DatasetAnalysis:
    """Runs every analysis over one uploaded table."""
    columns = ColumnResolver.resolve(headers if headers is not None else headers_of(rows), rows)
    items = WorkItemParser.parse(rows, columns)
    logger.info("Parsed %d work items from %d rows", len(items), len(rows))
    daily = ThroughputAggregator.build(items)
    return DatasetAnalysis(
        columns=columns,
        items=items,
        cycle_time=StatsCalculator.analyze_cycle_times(items),
        process_behaviour=ProcessBehaviourAnalyzer.analyze_work_items(items),
        correlation=CorrelationAggregator.aggregate(items),
        daily_throughput=daily,
        throughput_summary=ThroughputAggregator.summarize(daily),
        forecast=MonteCarloForecaster.run(daily, settings, random_source),
    )
