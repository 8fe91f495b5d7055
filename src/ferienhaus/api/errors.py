"""Translate booking domain errors into HTTP errors."""

from fastapi import HTTPException

from ferienhaus.domain.errors import (
    BookingError,
    BookingNotFoundError,
    CommittedOverlapError,
    DuplicateUserError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidDateRangeError,
    InvalidRegistrationError,
    MissingOwnerError,
    PersistenceError,
)

_STATUS_BY_ERROR: list[tuple[type[BookingError], int]] = [
    (InvalidDateRangeError, 422),
    (CommittedOverlapError, 409),
    (MissingOwnerError, 400),
    (BookingNotFoundError, 404),
    (InvalidCredentialsError, 401),
    (ForbiddenError, 403),
    (PersistenceError, 503),
    (DuplicateUserError, 409),
    (InvalidRegistrationError, 422),
]


def to_http_exception(exc: BookingError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code = 400

    if isinstance(exc, CommittedOverlapError):
        return HTTPException(
            status_code=status_code,
            detail={
                "message": str(exc),
                "conflicting_segment_id": exc.conflicting_segment_id,
                "existing_start": exc.existing_start.isoformat(),
                "existing_end": exc.existing_end.isoformat(),
            },
        )
    return HTTPException(status_code=status_code, detail=str(exc))
