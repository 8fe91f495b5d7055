"""Tests for calendar date helpers."""

from datetime import date

import pytest

from ferienhaus.domain.dates import (
    day_count,
    format_date,
    iter_days,
    month_days,
    parse_date,
    ranges_overlap,
    validate_range,
)
from ferienhaus.domain.errors import InvalidDateRangeError


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2025-07-10") == date(2025, 7, 10)

    def test_date_passthrough(self):
        value = date(2025, 7, 10)
        assert parse_date(value) is value

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_is_invalid_range(self, value):
        with pytest.raises(InvalidDateRangeError, match="start_date is required"):
            parse_date(value, field="start_date")

    def test_malformed(self):
        with pytest.raises(InvalidDateRangeError, match="YYYY-MM-DD"):
            parse_date("10.07.2025")

    def test_format_roundtrip_string(self):
        assert format_date(date(2025, 1, 5)) == "2025-01-05"


class TestIterDays:
    def test_inclusive_both_ends(self):
        days = list(iter_days(date(2025, 7, 30), date(2025, 8, 2)))
        assert days == [
            date(2025, 7, 30),
            date(2025, 7, 31),
            date(2025, 8, 1),
            date(2025, 8, 2),
        ]

    def test_single_day(self):
        assert list(iter_days(date(2025, 7, 1), date(2025, 7, 1))) == [date(2025, 7, 1)]

    def test_reversed_range_is_empty(self):
        assert list(iter_days(date(2025, 7, 2), date(2025, 7, 1))) == []

    def test_day_count(self):
        assert day_count(date(2025, 7, 10), date(2025, 7, 20)) == 11


class TestRangesOverlap:
    def test_touching_ranges_overlap(self):
        """Inclusive ranges: sharing the boundary day is an overlap."""
        assert ranges_overlap(date(2025, 7, 1), date(2025, 7, 5), date(2025, 7, 5), date(2025, 7, 9))

    def test_adjacent_ranges_do_not_overlap(self):
        assert not ranges_overlap(date(2025, 7, 1), date(2025, 7, 4), date(2025, 7, 5), date(2025, 7, 9))

    def test_containment(self):
        assert ranges_overlap(date(2025, 7, 3), date(2025, 7, 4), date(2025, 7, 1), date(2025, 7, 9))


class TestMonthDays:
    def test_february_leap_year(self):
        days = month_days(2028, 2)
        assert len(days) == 29
        assert days[0] == date(2028, 2, 1)
        assert days[-1] == date(2028, 2, 29)

    def test_july(self):
        assert len(month_days(2025, 7)) == 31


class TestValidateRange:
    def test_valid(self):
        validate_range(date(2025, 7, 10), date(2025, 7, 10))

    def test_end_before_start(self):
        with pytest.raises(InvalidDateRangeError, match="before start_date"):
            validate_range(date(2025, 7, 10), date(2025, 7, 9))

    def test_missing(self):
        with pytest.raises(InvalidDateRangeError, match="required"):
            validate_range(None, date(2025, 7, 9))

    def test_backdated_start(self):
        with pytest.raises(InvalidDateRangeError, match="past"):
            validate_range(date(2025, 6, 30), date(2025, 7, 2), today=date(2025, 7, 1))

    def test_start_today_is_allowed(self):
        validate_range(date(2025, 7, 1), date(2025, 7, 2), today=date(2025, 7, 1))
