"""Booking store - the owned collection of booking segments.

Mutations (add, update, delete) run one at a time: the store's own lock
serializes threads, and the repository lock serializes every store sharing
the same repository (other workers included). Reconciliation reads the whole
committed set, so an interleaved add could otherwise let two submissions
commit the same day.

Each mutation reloads the current segments inside the repository lock,
builds the complete next snapshot from them, and saves it before the lock is
released. Reads always go to the repository, so they see what other stores
committed. If persistence fails nothing is written and PersistenceError is
raised.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterable, TypeVar

from ferienhaus.infra.repositories.segments_repository import SegmentRepository
from ferienhaus.observability.logging import get_logger

from .availability import assert_range_available, is_range_available
from .dates import month_days, validate_range
from .errors import (
    BookingError,
    BookingNotFoundError,
    CommittedOverlapError,
    PersistenceError,
)
from .segments import Owner, Segment, Status, reconcile

logger = get_logger(__name__)

SegmentGuard = Callable[[Segment], None]
NameLookup = Callable[[str], str | None]
Snapshot = tuple[Segment, ...]

T = TypeVar("T")


@dataclass(frozen=True)
class SegmentPatch:
    """Fields to merge onto one segment. None means "leave unchanged"."""

    start_date: date | None = None
    end_date: date | None = None
    status: Status | None = None
    user_id: str | None = None
    user_name: str | None = None

    def changes(self) -> dict:
        out = {k: v for k, v in self.__dict__.items() if v is not None}
        if "status" in out:
            out["status"] = Status(out["status"])
        return out


def _find(segments: Iterable[Segment], segment_id: str) -> Segment:
    for seg in segments:
        if seg.id == segment_id:
            return seg
    raise BookingNotFoundError(f"Booking {segment_id} not found")


class BookingStore:
    def __init__(self, repository: SegmentRepository, *, property_id: str) -> None:
        self.property_id = property_id
        self._repository = repository
        self._lock = threading.Lock()

    # ── reads ──────────────────────────────────────────────────────────

    def snapshot(self) -> Snapshot:
        """Current segments as stored.

        Raises:
            PersistenceError: If the repository could not be read.
        """
        try:
            return tuple(self._repository.load_all())
        except Exception as exc:
            logger.exception("booking load failed")
            raise PersistenceError("Could not load bookings") from exc

    def __len__(self) -> int:
        return len(self.snapshot())

    def find(self, segment_id: str) -> Segment | None:
        try:
            return _find(self.snapshot(), segment_id)
        except BookingNotFoundError:
            return None

    def get(self, segment_id: str) -> Segment:
        return _find(self.snapshot(), segment_id)

    def group(self, request_id: str) -> list[Segment]:
        return sorted(
            (s for s in self.snapshot() if s.original_request_id == request_id),
            key=lambda s: s.start_date,
        )

    def list_bookings(
        self,
        search: str | None = None,
        status: Status | None = None,
    ) -> list[Segment]:
        """Segments sorted by start date, filtered like the admin table.

        Args:
            search: Case-insensitive substring of the user name or segment id.
            status: Only segments with this status.
        """
        segments: Iterable[Segment] = self.snapshot()
        if search:
            needle = search.lower()
            segments = (
                s for s in segments
                if needle in s.user_name.lower() or needle in s.id.lower()
            )
        if status is not None:
            segments = (s for s in segments if s.status is Status(status))
        return sorted(segments, key=lambda s: (s.start_date, s.end_date, s.id))

    def bookings_on(self, day: date) -> list[Segment]:
        return sorted(
            (s for s in self.snapshot() if s.covers(day)),
            key=lambda s: (s.start_date, s.id),
        )

    def month_calendar(self, year: int, month: int) -> list[tuple[date, list[Segment]]]:
        """Per-day segment lists for every day of a month."""
        segments = self.snapshot()
        return [
            (day, [s for s in segments if s.covers(day)])
            for day in month_days(year, month)
        ]

    def is_range_available(
        self,
        start: date,
        end: date,
        exclude_segment_id: str | None = None,
    ) -> bool:
        return is_range_available(self.snapshot(), start, end, exclude_segment_id)

    # ── mutations ──────────────────────────────────────────────────────

    def add_booking(
        self,
        start: date,
        end: date,
        status: Status,
        owner: Owner,
    ) -> list[Segment]:
        """Reconcile a requested range and append the resulting segments.

        Never fails on overlap: obstructed days become ``anfrage``.

        Raises:
            InvalidDateRangeError: If end is before start.
            PersistenceError: If the snapshot could not be saved.
        """

        def change(current: Snapshot) -> tuple[Snapshot, list[Segment]]:
            drafts = reconcile(
                start,
                end,
                status,
                owner,
                current,
                property_id=self.property_id,
            )
            created = [d.materialize() for d in drafts]
            return current + tuple(created), created

        created = self._mutate(change)

        logger.info(
            "booking reconciled",
            extra={
                "extra_fields": {
                    "original_request_id": created[0].original_request_id,
                    "user_id": owner.id,
                    "requested_status": Status(status).value,
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                    "segment_count": len(created),
                    "statuses": [s.status.value for s in created],
                },
            },
        )
        return created

    def update_booking(
        self,
        segment_id: str,
        patch: SegmentPatch,
        *,
        require_available: bool = False,
        guard: SegmentGuard | None = None,
        name_for: NameLookup | None = None,
    ) -> Segment:
        """Merge patch fields onto one segment.

        No overlap validation happens unless require_available is set, in which
        case a committed result must not overlap any other committed segment.

        Args:
            segment_id: Target segment.
            patch: Fields to change.
            require_available: Run the availability check on the merged segment.
            guard: Called with the current segment inside the critical section;
                may raise to veto the update.
            name_for: Resolves the owner name for the merged user id inside the
                critical section. A None result keeps the stored name.

        Raises:
            BookingNotFoundError: Unknown segment id.
            InvalidDateRangeError: Merged end date before start date.
            CommittedOverlapError: Availability check failed.
            PersistenceError: If the snapshot could not be saved.
        """

        def change(current: Snapshot) -> tuple[Snapshot, Segment]:
            target = _find(current, segment_id)
            if guard is not None:
                guard(target)

            updated = replace(target, **patch.changes())
            if name_for is not None:
                name = name_for(updated.user_id)
                if name is not None:
                    updated = replace(updated, user_name=name)
            validate_range(updated.start_date, updated.end_date)

            if require_available and updated.is_committed:
                try:
                    assert_range_available(
                        current,
                        updated.start_date,
                        updated.end_date,
                        exclude_segment_id=segment_id,
                    )
                except CommittedOverlapError as exc:
                    logger.warning(
                        "committed overlap rejected",
                        extra={
                            "extra_fields": {
                                "segment_id": segment_id,
                                "conflicting_segment_id": exc.conflicting_segment_id,
                                "requested_start": updated.start_date.isoformat(),
                                "requested_end": updated.end_date.isoformat(),
                            },
                        },
                    )
                    raise

            return tuple(updated if s.id == segment_id else s for s in current), updated

        updated = self._mutate(change)

        logger.info(
            "booking updated",
            extra={
                "extra_fields": {
                    "segment_id": segment_id,
                    "fields": sorted(patch.changes()),
                    "status": updated.status.value,
                },
            },
        )
        return updated

    def delete_booking(
        self,
        segment_id: str,
        *,
        guard: SegmentGuard | None = None,
    ) -> list[Segment]:
        """Delete a segment, or its whole request group when it has one.

        The guard is called for every segment that would be removed, so a
        group whose segments belong to different owners is only deleted when
        each of them passes.

        Returns:
            The removed segments.

        Raises:
            BookingNotFoundError: Unknown segment id.
            PersistenceError: If the snapshot could not be saved.
        """

        def change(current: Snapshot) -> tuple[Snapshot, list[Segment]]:
            target = _find(current, segment_id)
            request_id = target.original_request_id
            if request_id is not None:
                removed = [s for s in current if s.original_request_id == request_id]
            else:
                removed = [target]

            if guard is not None:
                for seg in removed:
                    guard(seg)

            removed_ids = {s.id for s in removed}
            return tuple(s for s in current if s.id not in removed_ids), removed

        removed = self._mutate(change)

        logger.info(
            "booking deleted",
            extra={
                "extra_fields": {
                    "segment_id": segment_id,
                    "original_request_id": removed[0].original_request_id,
                    "deleted_count": len(removed),
                },
            },
        )
        return removed

    def _mutate(self, change: Callable[[Snapshot], tuple[Snapshot, T]]) -> T:
        """Apply one change to freshly loaded segments and save the result.

        Domain errors raised by ``change`` abort the mutation unchanged. Any
        other failure inside the repository session becomes PersistenceError.
        """
        with self._lock:
            try:
                with self._repository.locked() as session:
                    segments, result = change(tuple(session.load_all()))
                    session.save_all(segments)
            except BookingError:
                raise
            except Exception as exc:
                logger.exception("booking persistence failed")
                raise PersistenceError("Could not persist bookings") from exc
        return result
