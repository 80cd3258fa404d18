import logging
import re
from datetime import date
from typing import Any, Optional

from .config import Config

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r'[/-]')


class DateNormalizer:
    """Parses day-first completion dates (DD/MM/YYYY or DD-MM-YYYY)."""

    @staticmethod
    def parse(value: Any) -> Optional[date]:
        """Returns the calendar date for ``value`` or None when it is not a plausible day-first date.

        Years outside Config.MIN_YEAR..Config.MAX_YEAR are rejected as a guard
        against transposed fields, so two-digit years never pass.
        """
        if isinstance(value, date): return DateNormalizer._in_range(value)
        if value is None: return None
        parts = _SEPARATORS.split(str(value).strip())
        if len(parts) != 3: return None
        try:
            day, month, year = (int(part.strip()) for part in parts)
        except ValueError:
            return None
        if not (1 <= day <= 31 and 1 <= month <= 12 and Config.MIN_YEAR <= year <= Config.MAX_YEAR):
            return None
        try:
            return date(year, month, day)
        except ValueError:
            logger.debug("Rejected impossible calendar date %r", value)
            return None

    @staticmethod
    def _in_range(value: date) -> Optional[date]:
        if hasattr(value, 'date') and callable(value.date): value = value.date()
        return value if Config.MIN_YEAR <= value.year <= Config.MAX_YEAR else None

    @staticmethod
    def format(value: date) -> str:
        return value.strftime('%d/%m/%Y')
