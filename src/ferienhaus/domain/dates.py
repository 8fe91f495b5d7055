"""Calendar date helpers.

All booking dates are plain ``datetime.date`` values: timezone-naive local
calendar days. Ranges are inclusive on both ends.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator

from .errors import InvalidDateRangeError

ISO_FORMAT = "%Y-%m-%d"


def parse_date(value: str | date | None, *, field: str = "date") -> date:
    """Parse a YYYY-MM-DD string into a date.

    Args:
        value: ISO date string, or an existing date (returned unchanged).
        field: Field name used in the error message.

    Raises:
        InvalidDateRangeError: If value is missing or malformed.
    """
    if value is None or value == "":
        raise InvalidDateRangeError(f"{field} is required")
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidDateRangeError(f"{field} must be YYYY-MM-DD, got {value!r}")


def format_date(value: date) -> str:
    return value.isoformat()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, inclusive. Empty if end < start."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def day_count(start: date, end: date) -> int:
    return (end - start).days + 1


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive-range overlap: touching ranges share a day and do overlap."""
    return start_a <= end_b and end_a >= start_b


def month_days(year: int, month: int) -> list[date]:
    """All days of a calendar month, in order."""
    _, last = calendar.monthrange(year, month)
    return list(iter_days(date(year, month, 1), date(year, month, last)))


def validate_range(
    start: date | None,
    end: date | None,
    *,
    today: date | None = None,
) -> None:
    """Check a requested range before any store mutation.

    Args:
        start: First day (inclusive).
        end: Last day (inclusive).
        today: When given, start must not lie before it (new submissions only).

    Raises:
        InvalidDateRangeError: On missing dates, end before start, or backdating.
    """
    if start is None or end is None:
        raise InvalidDateRangeError("start_date and end_date are required")
    if end < start:
        raise InvalidDateRangeError(
            f"end_date {end.isoformat()} is before start_date {start.isoformat()}"
        )
    if today is not None and start < today:
        raise InvalidDateRangeError(
            f"start_date {start.isoformat()} lies in the past"
        )
