"""Shared test helper functions.

Regular functions, not fixtures, so both conftest.py and test modules can
import them.
"""

from __future__ import annotations

from datetime import date

from ferienhaus.domain.segments import Segment, Status
from ferienhaus.domain.users import User
from ferienhaus.infra.hashing import hash_password

PROPERTY_ID = "ferienhaus1"
TODAY = date(2025, 7, 1)
JWT_SECRET = "test-secret-please-ignore"


def d(text: str) -> date:
    """Shorthand: d("2025-07-10")."""
    return date.fromisoformat(text)


def make_segment(
    segment_id: str,
    start: str,
    end: str,
    status: Status | str = Status.CONFIRMED,
    *,
    user_id: str = "user2",
    user_name: str = "Erika Musterfrau",
    request_id: str | None = None,
) -> Segment:
    return Segment(
        id=segment_id,
        original_request_id=request_id,
        user_id=user_id,
        user_name=user_name,
        start_date=d(start),
        end_date=d(end),
        status=Status(status),
        property_id=PROPERTY_ID,
    )


def make_user(
    user_id: str,
    name: str,
    role: str = "user",
    *,
    email: str | None = None,
    password: str = "secret",
) -> User:
    # low bcrypt cost keeps the suite fast
    return User(
        id=user_id,
        name=name,
        email=email or f"{user_id}@example.com",
        role=role,  # type: ignore[arg-type]
        password_hash=hash_password(password, rounds=4),
    )


def cover_days(segments) -> list[date]:
    """Every day covered by the given segments, in segment order."""
    from ferienhaus.domain.dates import iter_days

    days: list[date] = []
    for seg in segments:
        days.extend(iter_days(seg.start_date, seg.end_date))
    return days
