"""Tests for environment-driven settings."""

import os
from unittest.mock import patch

import pytest

from ferienhaus.infra.settings import get_settings


class TestGetSettings:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()

        assert settings.property_id == "ferienhaus1"
        assert settings.local_tz == "Europe/Berlin"
        assert settings.jwt_secret is None
        assert settings.jwt_ttl_seconds == 3600
        assert settings.storage_backend == "memory"
        assert settings.seed_demo_data is False

    def test_from_env(self):
        env = {
            "PROPERTY_ID": "haus2",
            "JWT_SECRET": "s3cret",
            "JWT_TTL_SECONDS": "600",
            "STORAGE_BACKEND": "Postgres",
            "DATABASE_URL": "postgres://u:p@h/db",
            "SEED_DEMO_DATA": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = get_settings()

        assert settings.property_id == "haus2"
        assert settings.jwt_secret == "s3cret"
        assert settings.jwt_ttl_seconds == 600
        assert settings.storage_backend == "postgres"
        assert settings.database_url == "postgres://u:p@h/db"
        assert settings.seed_demo_data is True

    def test_empty_secret_is_unset(self):
        with patch.dict(os.environ, {"JWT_SECRET": ""}, clear=True):
            assert get_settings().jwt_secret is None

    def test_invalid_backend(self):
        with patch.dict(os.environ, {"STORAGE_BACKEND": "redis"}, clear=True):
            with pytest.raises(ValueError, match="STORAGE_BACKEND"):
                get_settings()
