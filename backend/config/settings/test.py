# config/settings/test.py
"""
Test environment settings.

This file is used exclusively for running tests.
"""

from .base import *

# Force test environment
ENVIRONMENT = "test"

# Load .env.test explicitly
from dotenv import load_dotenv

env_test_path = BASE_DIR / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=False)

from .databases import get_database_config

DATABASES = {"default": get_database_config("test")}

# Isolated in-process cache, never Redis
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "prompt-manager-test",
    }
}

# Speed up password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]
