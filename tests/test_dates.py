"""
Tests for date-range planning.
"""

import logging
from datetime import date

import pandas as pd
import pytest

from hydatdb.dates import DateRange, plan_date_range
from hydatdb.exceptions import HydatValidationError


class TestPlanDateRange:
    """Test plan_date_range() validation."""

    def test_no_bounds_returns_none(self, caplog):
        with caplog.at_level(logging.INFO, logger="hydatdb.dates"):
            assert plan_date_range() is None
        assert "All dates available will be returned" in caplog.text

    @pytest.mark.parametrize("sentinel", ["all", "ALL", "All"])
    def test_legacy_all_sentinel(self, sentinel):
        assert plan_date_range(sentinel, sentinel) is None

    def test_literal_range(self):
        date_range = plan_date_range("1965-06-01", "1966-03-01")

        assert date_range == DateRange(date(1965, 6, 1), date(1966, 3, 1))
        assert date_range.year_range == (1965, 1966)

    def test_accepts_date_objects(self):
        date_range = plan_date_range(date(2000, 1, 1), "2000-12-31")
        assert date_range.start == date(2000, 1, 1)

    def test_leap_day(self):
        date_range = plan_date_range("1976-02-29", "1976-02-29")
        assert date_range.start == date_range.end == date(1976, 2, 29)

    @pytest.mark.parametrize(
        "start, end",
        [
            ("1977-02-29", "1977-03-01"),
            ("2000/01/01", "2000-02-01"),
            ("01-01-2000", "2000-02-01"),
            ("2000-01-01", "next week"),
            ("2000-13-01", "2000-12-31"),
            ("1976-2-9", "1976-12-31"),
            ("1976-02-01", "1976-12-1"),
        ],
    )
    def test_malformed_dates(self, start, end):
        with pytest.raises(HydatValidationError, match="YYYY-MM-DD"):
            plan_date_range(start, end)

    def test_one_bound_only(self):
        with pytest.raises(HydatValidationError, match="end_date"):
            plan_date_range("2000-01-01", None)
        with pytest.raises(HydatValidationError, match="start_date"):
            plan_date_range("all", "2000-01-01")

    def test_inverted_range(self):
        with pytest.raises(HydatValidationError, match="after end_date"):
            plan_date_range("2000-02-01", "2000-01-01")


class TestDateRange:
    """Test DateRange filtering."""

    def test_contains_is_inclusive(self):
        date_range = DateRange(date(2000, 1, 2), date(2000, 1, 4))
        dates = pd.Series(pd.date_range("2000-01-01", "2000-01-05"))

        assert date_range.contains(dates).tolist() == [False, True, True, True, False]

    def test_construct_inverted(self):
        with pytest.raises(HydatValidationError):
            DateRange(date(2000, 1, 2), date(2000, 1, 1))
