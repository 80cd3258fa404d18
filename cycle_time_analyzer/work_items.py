import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

from .columns import ResolvedColumns, is_blank, to_number
from .dates import DateNormalizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkItem:
    id: str
    completed_on: date
    cycle_time_days: float
    estimate: Optional[float] = None


class WorkItemParser:
    """Turns raw rows into WorkItems, dropping any row that cannot be fully parsed."""

    @staticmethod
    def parse(rows: Sequence[Mapping[str, Any]], columns: ResolvedColumns) -> List[WorkItem]:
        if not columns.has_usable_data: return []
        items = []
        for index, row in enumerate(rows):
            item = WorkItemParser._parse_row(row, index, columns)
            if item is not None: items.append(item)
        dropped = len(rows) - len(items)
        if dropped:
            logger.info("Excluded %d of %d rows with a missing or invalid end date or cycle time", dropped, len(rows))
        return items

    @staticmethod
    def _parse_row(row: Mapping[str, Any], index: int, columns: ResolvedColumns) -> Optional[WorkItem]:
        completed_on = DateNormalizer.parse(row.get(columns.end_date_key))
        cycle_time = to_number(row.get(columns.cycle_time_key))
        if completed_on is None or cycle_time is None or cycle_time < 0:
            logger.debug("Row %d dropped: end=%r ct=%r", index, row.get(columns.end_date_key), row.get(columns.cycle_time_key))
            return None
        estimate = to_number(row.get(columns.estimate_key)) if columns.estimate_key else None
        raw_id = row.get(columns.id_key) if columns.id_key else None
        item_id = f"Item-{index}" if is_blank(raw_id) else str(raw_id).strip()
        return WorkItem(id=item_id, completed_on=completed_on, cycle_time_days=cycle_time, estimate=estimate)


def chronological(items: Sequence[WorkItem]) -> List[WorkItem]:
    """Stable sort by completion date; rows finishing the same day keep input order."""
    return sorted(items, key=lambda item: item.completed_on)
