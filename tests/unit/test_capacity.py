"""Tests for yfp.prices.capacity."""

import pytest

from yfp.core.exceptions import DateParseError
from yfp.core.models import Frequency
from yfp.prices.capacity import estimate_capacity


class TestDaily:
    def test_whole_days_between(self):
        assert estimate_capacity(Frequency.DAILY, "2020-01-01", "2020-01-10") == 9

    def test_same_day_is_zero(self):
        assert estimate_capacity(Frequency.DAILY, "2020-01-01", "2020-01-01") == 0

    def test_reversed_range_floors_at_zero(self):
        assert estimate_capacity(Frequency.DAILY, "2020-01-10", "2020-01-01") == 0

    def test_spans_leap_year(self):
        assert estimate_capacity(Frequency.DAILY, "2020-01-01", "2021-01-01") == 366


class TestWeekly:
    def test_whole_weeks_between(self):
        assert estimate_capacity(Frequency.WEEKLY, "2020-01-01", "2020-01-29") == 4

    def test_partial_week_truncates(self):
        assert estimate_capacity(Frequency.WEEKLY, "2020-01-01", "2020-01-07") == 0
        assert estimate_capacity(Frequency.WEEKLY, "2020-01-01", "2020-01-14") == 1

    def test_reversed_range_floors_at_zero(self):
        assert estimate_capacity(Frequency.WEEKLY, "2020-03-01", "2020-01-01") == 0


class TestMonthly:
    @pytest.mark.parametrize(
        ("start", "end"),
        [("2020-01-01", "2020-12-31"), ("2020-01-01", "2020-01-01"), ("2021-01-01", "2020-01-01")],
    )
    def test_unknown(self, start: str, end: str):
        assert estimate_capacity(Frequency.MONTHLY, start, end) is None

    def test_still_validates_dates(self):
        with pytest.raises(DateParseError):
            estimate_capacity(Frequency.MONTHLY, "2020-01-01", "yesterday")


class TestInvalidInput:
    @pytest.mark.parametrize("frequency", list(Frequency))
    def test_bad_start(self, frequency: Frequency):
        with pytest.raises(DateParseError):
            estimate_capacity(frequency, "01/01/2020", "2020-01-10")

    def test_bad_end(self):
        with pytest.raises(DateParseError):
            estimate_capacity(Frequency.DAILY, "2020-01-01", "Jan 10,2020")
