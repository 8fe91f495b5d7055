"""Committed-range availability checks.

Overlap formula (inclusive ranges):  start <= other.end AND end >= other.start

Only committed statuses (confirmed, reserved) occupy the calendar; pending
``anfrage`` segments are ignored.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from .dates import ranges_overlap
from .errors import CommittedOverlapError
from .segments import Segment


def find_committed_conflict(
    segments: Iterable[Segment],
    start: date,
    end: date,
    *,
    exclude_segment_id: str | None = None,
) -> Segment | None:
    """Return the first committed segment overlapping [start, end], if any.

    Args:
        segments: Segments to scan.
        start: First day of the candidate range (inclusive).
        end: Last day of the candidate range (inclusive).
        exclude_segment_id: Segment to skip, so an edited segment never
            blocks itself.
    """
    for seg in sorted(segments, key=lambda s: s.start_date):
        if not seg.is_committed:
            continue
        if exclude_segment_id is not None and seg.id == exclude_segment_id:
            continue
        if ranges_overlap(start, end, seg.start_date, seg.end_date):
            return seg
    return None


def is_range_available(
    segments: Iterable[Segment],
    start: date,
    end: date,
    exclude_segment_id: str | None = None,
) -> bool:
    return find_committed_conflict(
        segments, start, end, exclude_segment_id=exclude_segment_id
    ) is None


def assert_range_available(
    segments: Iterable[Segment],
    start: date,
    end: date,
    exclude_segment_id: str | None = None,
) -> None:
    """Raise CommittedOverlapError if [start, end] overlaps a committed segment."""
    conflict = find_committed_conflict(
        segments, start, end, exclude_segment_id=exclude_segment_id
    )
    if conflict is not None:
        raise CommittedOverlapError(
            conflicting_segment_id=conflict.id,
            existing_start=conflict.start_date,
            existing_end=conflict.end_date,
        )
