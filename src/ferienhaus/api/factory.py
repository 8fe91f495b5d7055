"""FastAPI application factory."""

from __future__ import annotations

from datetime import date
from typing import Callable

from fastapi import FastAPI, Request, Response

from ferienhaus.domain.booking_store import BookingStore
from ferienhaus.domain.bookings import BookingService
from ferienhaus.domain.users import UserDirectory
from ferienhaus.infra.repositories.segments_repository import (
    InMemorySegmentRepository,
    PostgresSegmentRepository,
    SegmentRepository,
)
from ferienhaus.infra.repositories.users_repository import PostgresUserRepository
from ferienhaus.infra.settings import Settings, get_settings
from ferienhaus.infra.time import local_today
from ferienhaus.observability.correlation import CORRELATION_ID_HEADER, correlation_scope
from ferienhaus.observability.logging import get_logger
from ferienhaus.operations.seed_demo import demo_segments, demo_users

from .routers import public

logger = get_logger(__name__)


def _build_repository(settings: Settings) -> SegmentRepository:
    if settings.storage_backend == "postgres":
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for STORAGE_BACKEND=postgres")
        return PostgresSegmentRepository(settings.property_id, dsn=settings.database_url)

    seed = demo_segments(settings.property_id) if settings.seed_demo_data else []
    return InMemorySegmentRepository(seed)


def _build_directory(settings: Settings) -> UserDirectory:
    if settings.storage_backend == "postgres":
        return UserDirectory(repository=PostgresUserRepository(dsn=settings.database_url))
    return UserDirectory(demo_users() if settings.seed_demo_data else [])


def create_app(
    settings: Settings | None = None,
    *,
    repository: SegmentRepository | None = None,
    directory: UserDirectory | None = None,
    today: Callable[[], date] | None = None,
) -> FastAPI:
    """Create the FastAPI app and wire the booking store.

    Args:
        settings: Explicit settings. If None, read from the environment.
        repository: Segment persistence. Defaults per settings.storage_backend.
        directory: User directory. Backed by the users table for the postgres
            backend; otherwise in memory, holding the demo users when
            SEED_DEMO_DATA is set.
        today: Clock for backdating checks. Defaults to today in LOCAL_TZ.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()
    if repository is None:
        repository = _build_repository(settings)
    if directory is None:
        directory = _build_directory(settings)
    if today is None:
        tz_name = settings.local_tz

        def today() -> date:
            return local_today(tz_name)

    store = BookingStore(repository, property_id=settings.property_id)

    app = FastAPI(
        title="Ferienhaus Planer",
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.directory = directory
    app.state.booking_service = BookingService(store, directory, today=today)

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_ID_HEADER)) as cid:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response

    app.include_router(public.router)

    logger.info(
        "app created",
        extra={
            "extra_fields": {
                "property_id": settings.property_id,
                "storage_backend": settings.storage_backend,
                "segment_count": len(store),
            },
        },
    )
    return app
