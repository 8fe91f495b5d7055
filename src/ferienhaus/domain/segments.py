"""Booking segments and the reconciliation algorithm.

A user submission covers one contiguous date range. Reconciliation classifies
every day of that range: days already occupied by a committed segment
(confirmed/reserved) are forced to ``anfrage``; all other days get the
requested status. Equal-status runs are then merged back into segments that
share one ``original_request_id``.

Pending (``anfrage``) segments never obstruct, whoever owns them. A committed
segment obstructs every requester, its own owner included.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable

from .dates import iter_days, validate_range


class Status(str, Enum):
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    ANFRAGE = "anfrage"

    @property
    def is_committed(self) -> bool:
        return self is not Status.ANFRAGE


@dataclass(frozen=True)
class Owner:
    """Who a segment belongs to, as seen at submission time."""

    id: str
    name: str


@dataclass(frozen=True)
class SegmentDraft:
    """A reconciled segment that has not been assigned an id yet."""

    start_date: date
    end_date: date
    status: Status
    user_id: str
    user_name: str
    property_id: str
    original_request_id: str

    def materialize(self, segment_id: str | None = None) -> Segment:
        return Segment(
            id=segment_id or new_id(),
            original_request_id=self.original_request_id,
            user_id=self.user_id,
            user_name=self.user_name,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
            property_id=self.property_id,
        )


@dataclass(frozen=True)
class Segment:
    """One persisted contiguous date range with a single status and owner.

    ``original_request_id`` is None for legacy single-segment records.
    """

    id: str
    original_request_id: str | None
    user_id: str
    user_name: str
    start_date: date
    end_date: date
    status: Status
    property_id: str

    @property
    def is_committed(self) -> bool:
        return self.status.is_committed

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "original_request_id": self.original_request_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status.value,
            "property_id": self.property_id,
        }


def new_id() -> str:
    return str(uuid.uuid4())


def _is_obstructed(
    day: date,
    existing: Iterable[Segment],
    exclude_request_id: str | None,
) -> bool:
    for seg in existing:
        if not seg.is_committed:
            continue
        if exclude_request_id is not None and seg.original_request_id == exclude_request_id:
            continue
        if seg.covers(day):
            return True
    return False


def reconcile(
    requested_start: date,
    requested_end: date,
    requested_status: Status,
    owner: Owner,
    existing: Iterable[Segment],
    *,
    property_id: str,
    request_id: str | None = None,
    exclude_request_id: str | None = None,
) -> list[SegmentDraft]:
    """Split a requested range into status-tagged segments.

    Args:
        requested_start: First requested day (inclusive).
        requested_end: Last requested day (inclusive).
        requested_status: Status for every unobstructed day.
        owner: Submitting owner; id and name are snapshotted onto each draft.
        existing: Current segments. Only committed ones can obstruct.
        property_id: Property stamped on every draft.
        request_id: Group id to use. A fresh one is generated when None.
        exclude_request_id: Segments of this group never obstruct (re-submitting
            a request over its own previous segments).

    Returns:
        Drafts ordered by date. Together they cover every requested day
        exactly once, and adjacent drafts always differ in status.

    Raises:
        InvalidDateRangeError: If requested_end is before requested_start.
    """
    validate_range(requested_start, requested_end)
    requested_status = Status(requested_status)
    group_id = request_id or new_id()
    existing = list(existing)

    runs: list[list[Any]] = []  # [status, first_day, last_day]
    for day in iter_days(requested_start, requested_end):
        if _is_obstructed(day, existing, exclude_request_id):
            status = Status.ANFRAGE
        else:
            status = requested_status

        if runs and runs[-1][0] is status:
            runs[-1][2] = day
        else:
            runs.append([status, day, day])

    return [
        SegmentDraft(
            start_date=first,
            end_date=last,
            status=status,
            user_id=owner.id,
            user_name=owner.name,
            property_id=property_id,
            original_request_id=group_id,
        )
        for status, first, last in runs
    ]
