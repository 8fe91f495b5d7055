"""Users repository - accounts in the ``users`` table (raw SQL, psycopg2)."""

from __future__ import annotations

from psycopg2 import errors as pg_errors

from ferienhaus.domain.errors import DuplicateUserError
from ferienhaus.domain.users import User
from ferienhaus.infra.db import fetchall, txn

_COLUMNS = "id, name, email, role, password_hash"


def _row_to_user(row: tuple) -> User:
    return User(
        id=str(row[0]),
        name=row[1],
        email=row[2],
        role=row[3],
        password_hash=row[4],
    )


class PostgresUserRepository:
    def __init__(self, dsn: str | None = None) -> None:
        self.dsn = dsn

    def load_all(self) -> list[User]:
        with txn(dsn=self.dsn) as cur:
            rows = fetchall(cur, f"SELECT {_COLUMNS} FROM users ORDER BY name, id")
        return [_row_to_user(row) for row in rows]

    def get(self, user_id: str) -> User | None:
        with txn(dsn=self.dsn) as cur:
            rows = fetchall(cur, f"SELECT {_COLUMNS} FROM users WHERE id = %s", (user_id,))
        return _row_to_user(rows[0]) if rows else None

    def find_by_email(self, email: str) -> User | None:
        with txn(dsn=self.dsn) as cur:
            rows = fetchall(
                cur,
                f"SELECT {_COLUMNS} FROM users WHERE lower(email) = lower(%s)",
                (email,),
            )
        return _row_to_user(rows[0]) if rows else None

    def save(self, user: User) -> None:
        """Insert or replace by id. The e-mail is unique case-insensitively."""
        try:
            with txn(dsn=self.dsn) as cur:
                cur.execute(
                    f"""
                    INSERT INTO users ({_COLUMNS})
                    VALUES (%s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO UPDATE SET
                        name = EXCLUDED.name,
                        email = EXCLUDED.email,
                        role = EXCLUDED.role,
                        password_hash = EXCLUDED.password_hash,
                        updated_at = now()
                    """,
                    (user.id, user.name, user.email, user.role, user.password_hash),
                )
        except pg_errors.UniqueViolation as exc:
            raise DuplicateUserError(f"E-mail {user.email} is already registered") from exc
