# backend/conftest.py

"""
Pytest configuration and fixtures.
"""
import pytest
from django.core.cache import cache


@pytest.fixture(scope="session")
def django_db_setup(django_db_setup, django_db_blocker):
    """Verify the test environment before any database test runs."""
    from django.conf import settings

    assert settings.ENVIRONMENT == "test"
    assert settings.DATABASES["default"]["ATOMIC_REQUESTS"] is True


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts with an empty cache (tag listing, rate limits)."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="alice", email="alice@example.com", password="testpass123"
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        username="bob", email="bob@example.com", password="testpass123"
    )
