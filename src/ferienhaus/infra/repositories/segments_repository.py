"""Segments repository - durable storage for booking segments.

Uses raw SQL with psycopg2 (no ORM). Every mutation runs inside ``locked()``:
the session reloads the current rows under a per-property lock, and its
``save_all`` writes only the difference to what it loaded. Several processes
sharing one database therefore serialize their mutations and each one
reconciles against the rows the others committed.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import ContextManager, Iterable, Iterator, Protocol

from psycopg2.extensions import cursor as PgCursor

from ferienhaus.domain.segments import Segment, Status
from ferienhaus.infra.db import fetchall, txn


class SegmentSession(Protocol):
    """Rows of one property while the repository lock is held."""

    def load_all(self) -> list[Segment]: ...

    def save_all(self, segments: Iterable[Segment]) -> None: ...


class SegmentRepository(Protocol):
    """Persistence boundary used by BookingStore."""

    def load_all(self) -> list[Segment]: ...

    def save_all(self, segments: Iterable[Segment]) -> None: ...

    def locked(self) -> ContextManager[SegmentSession]: ...


class InMemorySegmentRepository:
    """Non-durable repository. Keeps its own copy of the last saved snapshot.

    Stores sharing one instance serialize their mutations on its lock.
    """

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        self._segments = list(segments)
        self._lock = threading.Lock()
        self.save_count = 0

    def load_all(self) -> list[Segment]:
        return list(self._segments)

    def save_all(self, segments: Iterable[Segment]) -> None:
        self._segments = list(segments)
        self.save_count += 1

    @contextmanager
    def locked(self) -> Iterator[InMemorySegmentRepository]:
        with self._lock:
            yield self


_COLUMNS = (
    "id, original_request_id, user_id, user_name, "
    "start_date, end_date, status, property_id"
)

_SELECT = f"""
    SELECT {_COLUMNS}
    FROM booking_segments
    WHERE property_id = %s
    ORDER BY start_date, id
"""

_UPSERT = f"""
    INSERT INTO booking_segments ({_COLUMNS})
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
    ON CONFLICT (id) DO UPDATE SET
        original_request_id = EXCLUDED.original_request_id,
        user_id = EXCLUDED.user_id,
        user_name = EXCLUDED.user_name,
        start_date = EXCLUDED.start_date,
        end_date = EXCLUDED.end_date,
        status = EXCLUDED.status,
        property_id = EXCLUDED.property_id
"""


def _row_to_segment(row: tuple) -> Segment:
    return Segment(
        id=str(row[0]),
        original_request_id=str(row[1]) if row[1] is not None else None,
        user_id=str(row[2]),
        user_name=row[3],
        start_date=row[4],
        end_date=row[5],
        status=Status(row[6]),
        property_id=row[7],
    )


def _segment_params(seg: Segment) -> tuple:
    return (
        seg.id,
        seg.original_request_id,
        seg.user_id,
        seg.user_name,
        seg.start_date,
        seg.end_date,
        seg.status.value,
        seg.property_id,
    )


class _PostgresSession:
    """Diffing writer bound to one open transaction."""

    def __init__(self, cur: PgCursor, property_id: str) -> None:
        self._cur = cur
        self.property_id = property_id
        self._loaded: dict[str, Segment] | None = None

    def load_all(self) -> list[Segment]:
        rows = fetchall(self._cur, _SELECT, (self.property_id,))
        segments = [_row_to_segment(row) for row in rows]
        self._loaded = {s.id: s for s in segments}
        return segments

    def save_all(self, segments: Iterable[Segment]) -> None:
        """Make the property's rows equal ``segments``, touching only changed rows."""
        segments = list(segments)
        if self._loaded is None:
            self.load_all()
        loaded = self._loaded or {}

        keep = {s.id for s in segments}
        stale = [sid for sid in loaded if sid not in keep]
        if stale:
            self._cur.execute(
                "DELETE FROM booking_segments WHERE property_id = %s AND id = ANY(%s)",
                (self.property_id, stale),
            )
        for seg in segments:
            if loaded.get(seg.id) != seg:
                self._cur.execute(_UPSERT, _segment_params(seg))

        self._loaded = {s.id: s for s in segments}


class PostgresSegmentRepository:
    """Repository backed by the ``booking_segments`` table."""

    def __init__(self, property_id: str, dsn: str | None = None) -> None:
        self.property_id = property_id
        self.dsn = dsn

    @property
    def lock_key(self) -> str:
        return f"booking_segments:{self.property_id}"

    def load_all(self) -> list[Segment]:
        with txn(dsn=self.dsn) as cur:
            return _PostgresSession(cur, self.property_id).load_all()

    def save_all(self, segments: Iterable[Segment]) -> None:
        """Replace every stored segment of the property with ``segments``."""
        with self.locked() as session:
            session.save_all(segments)

    @contextmanager
    def locked(self) -> Iterator[_PostgresSession]:
        """One transaction holding the property's advisory lock until commit."""
        with txn(dsn=self.dsn) as cur:
            cur.execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (self.lock_key,))
            yield _PostgresSession(cur, self.property_id)
