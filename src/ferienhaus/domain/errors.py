"""Booking domain errors.

Every operation either succeeds or raises one of these before touching the
store. Route handlers translate them into HTTP status codes.
"""

from __future__ import annotations

from datetime import date


class BookingError(Exception):
    """Base class for booking domain failures."""

    pass


class InvalidDateRangeError(BookingError):
    """Raised for missing dates, end before start, or a backdated submission."""

    pass


class CommittedOverlapError(BookingError):
    """Raised when a status-commit edit would overlap another committed segment."""

    def __init__(
        self,
        conflicting_segment_id: str,
        existing_start: date,
        existing_end: date,
    ) -> None:
        self.conflicting_segment_id = conflicting_segment_id
        self.existing_start = existing_start
        self.existing_end = existing_end
        super().__init__(
            f"Range overlaps committed segment {conflicting_segment_id} "
            f"({existing_start} to {existing_end})"
        )


class MissingOwnerError(BookingError):
    """Raised when no owner can be resolved for a submission."""

    pass


class BookingNotFoundError(BookingError):
    """Raised when a segment id is absent from the store."""

    pass


class InvalidCredentialsError(BookingError):
    """Raised when e-mail/password do not match a known user."""

    pass


class ForbiddenError(BookingError):
    """Raised when a non-admin acts outside their own segments."""

    pass


class PersistenceError(BookingError):
    """Raised when loading or saving bookings fails.

    A failed mutation writes nothing.
    """

    pass


class DuplicateUserError(BookingError):
    """Raised when an e-mail address is already registered."""

    pass


class InvalidRegistrationError(BookingError):
    """Raised for a registration without name, e-mail, or password."""

    pass
