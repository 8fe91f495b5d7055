"""Shared pytest fixtures for Ferienhaus Planer tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from .helpers import JWT_SECRET, PROPERTY_ID, TODAY, make_user  # noqa: E402


@pytest.fixture
def max_user():
    return make_user("user1", "Max Mustermann", email="max@example.com", password="password123")


@pytest.fixture
def erika():
    return make_user("user2", "Erika Musterfrau", email="erika@example.com", password="password456")


@pytest.fixture
def admin():
    return make_user("admin1", "Admina Administrator", "admin", email="admin@example.com", password="adminpassword")


@pytest.fixture
def directory(max_user, erika, admin):
    from ferienhaus.domain.users import UserDirectory

    return UserDirectory([max_user, erika, admin])


@pytest.fixture
def repository():
    from ferienhaus.infra.repositories.segments_repository import InMemorySegmentRepository

    return InMemorySegmentRepository()


@pytest.fixture
def store(repository):
    from ferienhaus.domain.booking_store import BookingStore

    return BookingStore(repository, property_id=PROPERTY_ID)


@pytest.fixture
def service(store, directory):
    from ferienhaus.domain.bookings import BookingService

    return BookingService(store, directory, today=lambda: TODAY)


@pytest.fixture
def settings():
    from ferienhaus.infra.settings import Settings

    return Settings(property_id=PROPERTY_ID, jwt_secret=JWT_SECRET)
