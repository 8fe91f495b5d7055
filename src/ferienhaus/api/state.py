"""Accessors for per-app singletons stored on ``app.state`` by the factory.

Kept as FastAPI dependencies so tests can override them.
"""

from fastapi import Request

from ferienhaus.domain.bookings import BookingService
from ferienhaus.domain.users import UserDirectory
from ferienhaus.infra.settings import Settings


def get_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def get_directory(request: Request) -> UserDirectory:
    return request.app.state.directory


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
