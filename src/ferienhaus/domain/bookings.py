"""Booking use cases - who may submit, edit, and delete which segments.

Authorization axis is the user role:
- admin: books for any user with any status, edits any segment (overlapping
  committed states may be forced), reassigns owners, resolves ``anfrage``.
- user: books and edits only their own segments; cannot touch pending
  ``anfrage`` segments; a committed edit must pass the availability check.

All validation happens before the store is mutated.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from .booking_store import BookingStore, SegmentPatch
from .dates import parse_date, validate_range
from .errors import ForbiddenError, MissingOwnerError
from .segments import Segment, Status
from .users import User, UserDirectory


class BookingService:
    def __init__(
        self,
        store: BookingStore,
        directory: UserDirectory,
        *,
        today: Callable[[], date],
    ) -> None:
        self.store = store
        self.directory = directory
        self._today = today

    def submit(
        self,
        actor: User | None,
        start: date | str | None,
        end: date | str | None,
        status: Status | str | None = None,
        target_user_id: str | None = None,
    ) -> list[Segment]:
        """Submit a new booking request for a date range.

        Args:
            actor: Authenticated user.
            start: First day (inclusive). Must not lie before today.
            end: Last day (inclusive).
            status: Requested status, ``reserved`` when omitted.
            target_user_id: Owner to book for. Required for admins; users may
                only name themselves.

        Returns:
            The created segments of the new request group.

        Raises:
            MissingOwnerError: No actor, or admin without a valid target user.
            InvalidDateRangeError: Missing dates, end before start, or backdated.
            ForbiddenError: A user booking for someone else.
        """
        if actor is None:
            raise MissingOwnerError("Authentication required")

        start_day = parse_date(start, field="start_date")
        end_day = parse_date(end, field="end_date")
        validate_range(start_day, end_day, today=self._today())

        if actor.is_admin:
            if not target_user_id:
                raise MissingOwnerError("Admins must select a user for the booking")
            owner = self.directory.get(target_user_id)
            if owner is None:
                raise MissingOwnerError(f"Unknown user {target_user_id}")
        else:
            if target_user_id and target_user_id != actor.id:
                raise ForbiddenError("Users can only book for themselves")
            owner = actor

        requested = Status(status) if status else Status.RESERVED
        return self.store.add_booking(start_day, end_day, requested, owner.as_owner())

    def edit(
        self,
        actor: User | None,
        segment_id: str,
        *,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
        status: Status | str | None = None,
        user_id: str | None = None,
    ) -> Segment:
        """Edit one segment. Past dates are allowed here.

        The owner's name snapshot is refreshed from the directory.

        Raises:
            MissingOwnerError: No actor, or admin reassigning to an unknown user.
            BookingNotFoundError: Unknown segment id.
            ForbiddenError: User editing a foreign or pending segment, or
                changing the owner.
            InvalidDateRangeError: Merged end date before start date.
            CommittedOverlapError: User's committed edit overlaps another
                committed segment.
        """
        if actor is None:
            raise MissingOwnerError("Authentication required")

        if user_id and self.directory.get(user_id) is None:
            raise MissingOwnerError(f"Unknown user {user_id}")

        patch = SegmentPatch(
            start_date=parse_date(start_date, field="start_date") if start_date else None,
            end_date=parse_date(end_date, field="end_date") if end_date else None,
            status=Status(status) if status else None,
            user_id=user_id,
        )

        def name_for(owner_id: str) -> str | None:
            owner = self.directory.get(owner_id)
            return owner.name if owner is not None else None

        if actor.is_admin:
            return self.store.update_booking(segment_id, patch, name_for=name_for)

        def guard(seg: Segment) -> None:
            if seg.user_id != actor.id:
                raise ForbiddenError("Users can only edit their own bookings")
            if seg.status is Status.ANFRAGE:
                raise ForbiddenError("Pending requests are resolved by an administrator")
            if user_id and user_id != seg.user_id:
                raise ForbiddenError("Users cannot reassign bookings")

        return self.store.update_booking(
            segment_id, patch, require_available=True, guard=guard, name_for=name_for
        )

    def delete(self, actor: User | None, segment_id: str) -> list[Segment]:
        """Delete a segment (its whole request group when it has one).

        Users may only delete a group in which every segment is their own.
        """
        if actor is None:
            raise MissingOwnerError("Authentication required")

        if actor.is_admin:
            return self.store.delete_booking(segment_id)

        def guard(seg: Segment) -> None:
            if seg.user_id != actor.id:
                raise ForbiddenError(
                    "Users can only delete request groups they fully own"
                )

        return self.store.delete_booking(segment_id, guard=guard)

    def check_availability(
        self,
        start: date | str | None,
        end: date | str | None,
        exclude_segment_id: str | None = None,
    ) -> bool:
        start_day = parse_date(start, field="start")
        end_day = parse_date(end, field="end")
        validate_range(start_day, end_day)
        return self.store.is_range_available(start_day, end_day, exclude_segment_id)
