"""
Date-range planning for the daily HYDAT queries.

The wide tables have no date column, so a requested range is applied in
two steps: a YEAR filter pushed into SQL, then an exact filter on the
reconstructed dates once the rows have been reshaped.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple, Union

import pandas as pd

from .exceptions import HydatValidationError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Legacy spelling of "no bound"; None is preferred.
ALL_DATES = "all"

DateArg = Optional[Union[str, date]]


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise HydatValidationError(
                f"start_date ({self.start.isoformat()}) is after end_date ({self.end.isoformat()})",
                "try swapping the values",
            )

    @property
    def start_year(self) -> int:
        return self.start.year

    @property
    def end_year(self) -> int:
        return self.end.year

    @property
    def year_range(self) -> Tuple[int, int]:
        """Inclusive (first, last) YEAR bounds for SQL pushdown."""
        return (self.start_year, self.end_year)

    def contains(self, dates: pd.Series) -> pd.Series:
        """Boolean mask of ``dates`` falling inside the range."""
        return (dates >= pd.Timestamp(self.start)) & (dates <= pd.Timestamp(self.end))


def _is_absent(value: DateArg) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() == ALL_DATES)


def _parse_date(value: DateArg, name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _DATE_PATTERN.fullmatch(value.strip()):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError:
            pass
    raise HydatValidationError(
        f"Invalid {name}: {value!r}", "dates need to be in YYYY-MM-DD format"
    )


def plan_date_range(start_date: DateArg = None, end_date: DateArg = None) -> Optional[DateRange]:
    """
    Validate a requested start/end pair.

    Args:
        start_date: First date (inclusive) as ``YYYY-MM-DD`` or a date, or None
        end_date: Last date (inclusive) as ``YYYY-MM-DD`` or a date, or None

    Returns:
        A DateRange, or None when neither bound was given

    Raises:
        HydatValidationError: If only one bound is given, a bound is not a
            valid ``YYYY-MM-DD`` date, or start_date is after end_date
    """
    if _is_absent(start_date) and _is_absent(end_date):
        logger.info("No start and end dates specified. All dates available will be returned.")
        return None

    start = _parse_date(None if _is_absent(start_date) else start_date, "start_date")
    end = _parse_date(None if _is_absent(end_date) else end_date, "end_date")
    return DateRange(start, end)
