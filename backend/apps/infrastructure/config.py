# apps/infrastructure/config.py

"""
Configuration Management

Environment-specific configurations for different deployment contexts.
"""

import os
from typing import Any, Dict


def get_environment() -> str:
    """
    Get current environment

    The Django setting wins when settings are configured, so test runs
    and override_settings see the environment Django sees.

    Returns:
        Environment name: 'test', 'development', 'staging', or 'production'
    """
    from django.conf import settings

    if settings.configured and hasattr(settings, "ENVIRONMENT"):
        return settings.ENVIRONMENT
    return os.getenv("ENVIRONMENT", "development")


def get_config() -> Dict[str, Any]:
    """
    Get configuration for current environment

    Returns:
        A fresh copy of the configuration dictionary for the active environment
    """
    env = get_environment()

    configs = {
        "test": TEST_CONFIG,
        "development": DEVELOPMENT_CONFIG,
        "staging": STAGING_CONFIG,
        "production": PRODUCTION_CONFIG,
    }

    config = {key: dict(value) if isinstance(value, dict) else value
              for key, value in configs.get(env, DEVELOPMENT_CONFIG).items()}
    config["environment"] = env

    return config


def _tag_cache_ttl() -> int:
    return int(os.getenv("TAG_CACHE_TTL", "300"))


# ============================================================
# TEST CONFIGURATION
# ============================================================

TEST_CONFIG = {
    "cache": {"alias": "default", "tag_ttl": 300},
    "tags": {"popular_limit": 10, "search_limit": 10},
    "dashboard": {"recent_prompts_limit": 5},
    "search": {"empty_query_returns_all": True},
}


# ============================================================
# DEVELOPMENT CONFIGURATION
# ============================================================

DEVELOPMENT_CONFIG = {
    "cache": {"alias": "default", "tag_ttl": _tag_cache_ttl()},
    "tags": {"popular_limit": 10, "search_limit": 10},
    "dashboard": {"recent_prompts_limit": 5},
    "search": {"empty_query_returns_all": True},
}


# ============================================================
# STAGING CONFIGURATION
# ============================================================

STAGING_CONFIG = {
    "cache": {"alias": "default", "tag_ttl": _tag_cache_ttl()},
    "tags": {"popular_limit": 10, "search_limit": 10},
    "dashboard": {"recent_prompts_limit": 5},
    "search": {"empty_query_returns_all": True},
}


# ============================================================
# PRODUCTION CONFIGURATION
# ============================================================

PRODUCTION_CONFIG = {
    "cache": {"alias": "default", "tag_ttl": _tag_cache_ttl()},
    "tags": {"popular_limit": 10, "search_limit": 10},
    "dashboard": {"recent_prompts_limit": 10},
    "search": {"empty_query_returns_all": True},
}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_cache_config() -> Dict[str, Any]:
    """Get cache configuration for current environment"""
    return get_config()["cache"]


def is_production() -> bool:
    """Check if running in production"""
    return get_environment() == "production"


def is_test() -> bool:
    """Check if running in test environment"""
    return get_environment() == "test"


def is_development() -> bool:
    """Check if running in development"""
    return get_environment() == "development"
