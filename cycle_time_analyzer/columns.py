import logging
import math
import re
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .config import Config

logger = logging.getLogger(__name__)

EXACT = 'exact'
INFERRED = 'inferred'
MISSING = 'missing'

_DATE_RE = re.compile(Config.DATE_PATTERN)


@dataclass(frozen=True)
class ResolvedColumns:
    """Semantic roles mapped to the headers that carry them.

    Each key is either a header present in the data or None. ``confidence``
    records how each role was found: ``exact`` for an alias match,
    ``inferred`` for content sniffing and ``missing`` when nothing matched.
    """
    id_key: Optional[str] = None
    end_date_key: Optional[str] = None
    cycle_time_key: Optional[str] = None
    estimate_key: Optional[str] = None
    confidence: Mapping[str, str] = field(default_factory=dict)

    @property
    def has_usable_data(self) -> bool:
        return self.end_date_key is not None and self.cycle_time_key is not None

    @property
    def low_confidence_roles(self) -> List[str]:
        return sorted(role for role, level in self.confidence.items() if level == INFERRED)


def is_blank(value: Any) -> bool:
    if value is None: return True
    if isinstance(value, float) and value != value: return True
    return str(value).strip() == ''


def to_number(value: Any) -> Optional[float]:
    """Parses a cell as a float, returning None for blanks and text."""
    if is_blank(value) or isinstance(value, bool): return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


class ColumnResolver:
    """Maps ambiguous tabular headers to the ID, End-Date, Cycle-Time and Estimate roles."""

    @staticmethod
    def resolve(headers: Sequence[str], rows: Optional[Sequence[Mapping[str, Any]]] = None) -> ResolvedColumns:
        headers = [h for h in headers if h is not None]
        found = {
            'id_key': ColumnResolver._find_alias(headers, Config.ID_ALIASES),
            'end_date_key': ColumnResolver._find_alias(headers, Config.END_DATE_ALIASES),
            'cycle_time_key': ColumnResolver._find_alias(headers, Config.CYCLE_TIME_ALIASES),
            'estimate_key': ColumnResolver._find_alias(headers, Config.ESTIMATE_ALIASES),
        }
        confidence = {role: EXACT if key else MISSING for role, key in found.items()}
        logger.debug("Alias column mapping: %s", found)

        if rows and (found['end_date_key'] is None or found['cycle_time_key'] is None):
            claimed = {key for key in found.values() if key}
            for col in headers:
                if col in claimed: continue
                sample = ColumnResolver._sample_values(rows, col)
                if found['end_date_key'] is None and ColumnResolver.looks_like_dates(sample):
                    found['end_date_key'] = col
                    confidence['end_date_key'] = INFERRED
                    logger.info("Inferred end date column from content: %s", col)
                    continue
                if found['cycle_time_key'] is None and ColumnResolver.looks_like_cycle_times(sample):
                    found['cycle_time_key'] = col
                    confidence['cycle_time_key'] = INFERRED
                    logger.info("Inferred cycle time column from content: %s", col)

        resolved = ResolvedColumns(confidence=confidence, **found)
        if not resolved.has_usable_data:
            logger.warning("No usable end date / cycle time columns among %s", list(headers))
        return resolved

    @staticmethod
    def looks_like_dates(sample: Iterable[Any]) -> bool:
        return any(_DATE_RE.fullmatch(str(val).strip()) for val in sample)

    @staticmethod
    def looks_like_cycle_times(sample: Sequence[Any]) -> bool:
        if not sample: return False
        low, high = Config.CYCLE_TIME_SNIFF_RANGE
        numbers = [to_number(val) for val in sample]
        return all(num is not None and low <= num <= high for num in numbers)

    @staticmethod
    def _find_alias(headers: Sequence[str], aliases: Sequence[str]) -> Optional[str]:
        return next((h for h in headers if str(h).strip().lower() in aliases), None)

    @staticmethod
    def _sample_values(rows: Sequence[Mapping[str, Any]], col: str) -> List[Any]:
        values = (row.get(col) for row in rows)
        return list(islice((val for val in values if not is_blank(val)), Config.SNIFF_SAMPLE_SIZE))


def headers_of(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Headers in first-seen order across all rows."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys(): seen.setdefault(key, None)
    return list(seen)
