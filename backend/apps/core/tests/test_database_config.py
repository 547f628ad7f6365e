"""
Tests for database configuration
"""
import pytest
from django.conf import settings
from django.db import connection

from config.settings.databases import get_database_config


@pytest.mark.django_db
class TestDatabaseConfiguration:
    """Test database is configured correctly for tests"""

    def test_database_connection(self):
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            assert cursor.fetchone()[0] == 1

    def test_requests_are_atomic(self):
        assert settings.DATABASES["default"]["ATOMIC_REQUESTS"] is True

    def test_environment_is_test(self):
        assert settings.ENVIRONMENT == "test", f"Expected test, got {settings.ENVIRONMENT}"


class TestDatabaseConfigHelpers:
    def test_test_config_defaults_to_sqlite(self, monkeypatch):
        monkeypatch.delenv("DB_ENGINE", raising=False)

        config = get_database_config("test")

        assert config["ENGINE"] == "django.db.backends.sqlite3"
        assert config["ATOMIC_REQUESTS"] is True

    def test_unknown_environment_is_rejected(self):
        with pytest.raises(ValueError, match="Invalid environment 'qa'"):
            get_database_config("qa")

    def test_remote_environment_requires_credentials(self, monkeypatch):
        for var in ("DB_NAME", "DB_USER", "DB_PASSWORD", "DB_HOST"):
            monkeypatch.delenv(var, raising=False)

        with pytest.raises(ValueError, match="Missing required environment variables"):
            get_database_config("production")


@pytest.mark.django_db
class TestDatabaseOperations:
    def test_database_isolation(self):
        """Each test starts without users"""
        from django.contrib.auth.models import User

        assert User.objects.count() == 0
