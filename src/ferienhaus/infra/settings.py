"""Service configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

StorageBackend = Literal["memory", "postgres"]

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        property_id: Constant property id stamped on every segment.
        local_tz: IANA zone used to compute "today" for backdating checks.
        jwt_secret: HS256 signing key. None until configured.
        jwt_issuer: ``iss`` claim on issued tokens.
        jwt_ttl_seconds: Token lifetime.
        storage_backend: "memory" or "postgres".
        database_url: psycopg2 DSN (postgres backend only).
        seed_demo_data: Load the demo users and bookings on startup.
    """

    property_id: str = "ferienhaus1"
    local_tz: str = "Europe/Berlin"
    jwt_secret: str | None = None
    jwt_issuer: str = "ferienhaus-planer"
    jwt_ttl_seconds: int = 3600
    storage_backend: StorageBackend = "memory"
    database_url: str | None = None
    seed_demo_data: bool = False


def get_settings() -> Settings:
    """Build Settings from the environment.

    Raises:
        ValueError: On an unknown STORAGE_BACKEND or non-numeric JWT_TTL_SECONDS.
    """
    backend = os.environ.get("STORAGE_BACKEND", "memory").strip().lower()
    if backend not in ("memory", "postgres"):
        raise ValueError(f"Invalid STORAGE_BACKEND: {backend}")

    return Settings(
        property_id=os.environ.get("PROPERTY_ID", "ferienhaus1"),
        local_tz=os.environ.get("LOCAL_TZ", "Europe/Berlin"),
        jwt_secret=os.environ.get("JWT_SECRET") or None,
        jwt_issuer=os.environ.get("JWT_ISSUER", "ferienhaus-planer"),
        jwt_ttl_seconds=int(os.environ.get("JWT_TTL_SECONDS", "3600")),
        storage_backend=backend,  # type: ignore[arg-type]
        database_url=os.environ.get("DATABASE_URL") or None,
        seed_demo_data=os.environ.get("SEED_DEMO_DATA", "").strip().lower() in _TRUTHY,
    )
