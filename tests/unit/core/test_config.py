"""
Unit tests for the configuration module.

Tests Settings parsing and environment handling.
"""

import os
from unittest.mock import patch

import pytest

from docversions.core.config import Settings


class TestListSettings:
    """Comma-separated and JSON list parsing."""

    @pytest.mark.unit
    def test_comma_separated_origins(self):
        with patch.dict(os.environ, {"CORS_ORIGINS": "http://a.test, http://b.test"}):
            settings = Settings(_env_file=None)

        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]

    @pytest.mark.unit
    def test_json_content_types(self):
        with patch.dict(os.environ, {"ALLOWED_UPLOAD_CONTENT_TYPES": '["application/pdf"]'}):
            settings = Settings(_env_file=None)

        assert settings.ALLOWED_UPLOAD_CONTENT_TYPES == ["application/pdf"]

    @pytest.mark.unit
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.ALLOWED_UPLOAD_CONTENT_TYPES == ["application/pdf", "image/jpeg"]
        assert settings.MAX_UPLOAD_SIZE == 100 * 1024 * 1024
        assert settings.API_PREFIX == "/api"
        assert settings.PORT == 3000


class TestDatabaseUrl:

    @pytest.mark.unit
    def test_explicit_url_wins(self):
        settings = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///x.db")

        assert settings.resolved_database_url == "sqlite+aiosqlite:///x.db"

    @pytest.mark.unit
    def test_url_built_from_parts(self):
        settings = Settings(
            _env_file=None,
            DATABASE_URL=None,
            DATABASE_USER="svc",
            DATABASE_PASSWORD="pw",
            DATABASE_HOST="db.internal",
            DATABASE_PORT=6543,
            DATABASE_NAME="versions",
        )

        assert settings.resolved_database_url == "postgresql+asyncpg://svc:pw@db.internal:6543/versions"


class TestEnvironment:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "environment,development,production",
        [
            ("development", True, False),
            ("LOCAL", True, False),
            ("prod", False, True),
            ("test", False, False),
        ],
    )
    def test_environment_flags(self, environment, development, production):
        settings = Settings(_env_file=None, ENVIRONMENT=environment)

        assert settings.is_development is development
        assert settings.is_production is production
