"""Database URL helpers for Alembic migrations.

Extracted so they can be tested without triggering alembic.context at import time.
"""

from __future__ import annotations

import os

from psycopg2.extensions import parse_dsn
from sqlalchemy.engine import URL

_DRIVER = "postgresql+psycopg2"


def _get_database_url() -> str:
    """Turn DATABASE_URL into a SQLAlchemy URL string.

    Accepts everything get_conn() accepts: libpq key=value DSNs and
    postgres:// / postgresql:// URIs. DB_PASSWORD fills in a missing password.
    A socket directory host (``host=/cloudsql/...``) moves to the query string.
    """
    raw = os.environ.get("DATABASE_URL")
    if not raw:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    if raw.startswith(_DRIVER + "://"):
        raw = "postgresql://" + raw[len(_DRIVER) + 3:]

    params = parse_dsn(raw)
    host = params.get("host")
    query = {}
    if host and host.startswith("/"):
        query["host"] = host
        host = None

    url = URL.create(
        _DRIVER,
        username=params.get("user"),
        password=params.get("password") or os.environ.get("DB_PASSWORD") or None,
        host=host,
        port=int(params["port"]) if params.get("port") else None,
        database=params.get("dbname"),
        query=query,
    )
    return url.render_as_string(hide_password=False)
