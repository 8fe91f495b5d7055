"""Tests for admin-only endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from ferienhaus.api.auth import get_current_user
from ferienhaus.api.factory import create_app
from ferienhaus.infra.repositories.segments_repository import InMemorySegmentRepository

from .helpers import TODAY


def _make_app(settings, directory, acting_user):
    app = create_app(
        settings,
        repository=InMemorySegmentRepository(),
        directory=directory,
        today=lambda: TODAY,
    )
    app.dependency_overrides[get_current_user] = lambda: acting_user
    return app


class TestUserListing:
    def test_user_gets_403(self, settings, directory, max_user):
        client = TestClient(_make_app(settings, directory, max_user))

        resp = client.get("/users")

        assert resp.status_code == 403
        assert "Insufficient role" in resp.json()["detail"]

    def test_admin_lists_users_by_name(self, settings, directory, admin):
        client = TestClient(_make_app(settings, directory, admin))

        resp = client.get("/users")

        assert resp.status_code == 200
        names = [u["name"] for u in resp.json()["users"]]
        assert names == ["Admina Administrator", "Erika Musterfrau", "Max Mustermann"]

    def test_admin_search(self, settings, directory, admin):
        client = TestClient(_make_app(settings, directory, admin))

        resp = client.get("/users", params={"q": "erika"})

        assert [u["id"] for u in resp.json()["users"]] == ["user2"]

    def test_password_hash_never_exposed(self, settings, directory, admin):
        client = TestClient(_make_app(settings, directory, admin))

        for user in client.get("/users").json()["users"]:
            assert set(user) == {"id", "name", "email", "role"}
