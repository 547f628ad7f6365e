"""
Database Configuration Module

Provides environment-specific database configurations for Django.
This module can be imported and tested independently of Django.

Supported environments:
- test: SQLite by default, PostgreSQL when DB_ENGINE=postgresql
- development: Local PostgreSQL
- staging: Managed PostgreSQL with SSL
- production: Managed PostgreSQL with verified SSL

Usage:
    from config.settings.databases import get_database_config

    db_config = get_database_config('development')
    DATABASES = {'default': db_config}
"""

import os
from pathlib import Path

# Base directory (backend root)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# ============================================================================
# COMMON DATABASE SETTINGS
# ============================================================================

COMMON_DB_SETTINGS = {
    'ENGINE': 'django.db.backends.postgresql',
    'CONN_MAX_AGE': 60,
    'ATOMIC_REQUESTS': True,  # One transaction per request
    'OPTIONS': {
        'connect_timeout': 10,
        'application_name': 'prompt-manager',
    },
}

REQUIRED_REMOTE_VARS = ['DB_NAME', 'DB_USER', 'DB_PASSWORD', 'DB_HOST']


# ============================================================================
# ENVIRONMENT-SPECIFIC CONFIGURATIONS
# ============================================================================

def get_database_config(environment: str) -> dict:
    """
    Get database configuration for specified environment.

    Args:
        environment: One of 'test', 'development', 'staging', 'production'

    Returns:
        Dictionary with Django database configuration

    Raises:
        ValueError: If environment is not recognized or required
            variables are missing

    Examples:
        >>> config = get_database_config('development')
        >>> config['ENGINE']
        'django.db.backends.postgresql'
    """
    config_functions = {
        'test': _get_test_config,
        'development': _get_development_config,
        'staging': _get_staging_config,
        'production': _get_production_config,
    }

    if environment not in config_functions:
        valid_envs = ', '.join(config_functions.keys())
        raise ValueError(
            f"Invalid environment '{environment}'. "
            f"Must be one of: {valid_envs}"
        )

    return config_functions[environment]()


def _get_test_config() -> dict:
    """
    Test environment configuration.

    SQLite unless DB_ENGINE=postgresql is exported, in which case the
    ephemeral PostgreSQL container on port 5433 is used.
    """
    if os.getenv('DB_ENGINE', 'sqlite') != 'postgresql':
        return {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'test_prompt_manager.sqlite3',
            'ATOMIC_REQUESTS': True,
            'TEST': {
                'NAME': BASE_DIR / 'test_prompt_manager.sqlite3',
            },
        }

    return {
        **COMMON_DB_SETTINGS,
        'NAME': os.getenv('DB_NAME', 'test_prompt_manager'),
        'USER': os.getenv('DB_USER', 'postgres'),
        'PASSWORD': os.getenv('DB_PASSWORD', 'postgres'),
        'HOST': os.getenv('DB_HOST', 'localhost'),
        'PORT': os.getenv('DB_PORT', '5433'),
        'OPTIONS': {
            **COMMON_DB_SETTINGS['OPTIONS'],
            'options': '-c search_path=public',
        },
        'TEST': {
            'NAME': 'test_prompt_manager',
        },
    }


def _get_development_config() -> dict:
    """
    Development environment configuration.

    Local PostgreSQL (port 5432) with a persistent volume.
    """
    return {
        **COMMON_DB_SETTINGS,
        'NAME': os.getenv('DB_NAME', 'prompt_manager_dev'),
        'USER': os.getenv('DB_USER', 'prompt_manager'),
        'PASSWORD': os.getenv('DB_PASSWORD', 'dev_password_123'),
        'HOST': os.getenv('DB_HOST', 'localhost'),
        'PORT': os.getenv('DB_PORT', '5432'),
        'OPTIONS': {
            **COMMON_DB_SETTINGS['OPTIONS'],
            'sslmode': 'disable',
        },
    }


def _get_staging_config() -> dict:
    """
    Staging environment configuration.

    SSL required. Credentials come from environment variables.
    """
    _require_remote_vars('staging')

    return {
        **COMMON_DB_SETTINGS,
        'NAME': os.getenv('DB_NAME'),
        'USER': os.getenv('DB_USER'),
        'PASSWORD': os.getenv('DB_PASSWORD'),
        'HOST': os.getenv('DB_HOST'),
        'PORT': os.getenv('DB_PORT', '5432'),
        'CONN_MAX_AGE': 300,
        'OPTIONS': {
            **COMMON_DB_SETTINGS['OPTIONS'],
            'sslmode': 'require',
        },
    }


def _get_production_config() -> dict:
    """
    Production environment configuration.

    SSL with full certificate verification and the longest connection reuse.
    """
    _require_remote_vars('production')

    return {
        **COMMON_DB_SETTINGS,
        'NAME': os.getenv('DB_NAME'),
        'USER': os.getenv('DB_USER'),
        'PASSWORD': os.getenv('DB_PASSWORD'),
        'HOST': os.getenv('DB_HOST'),
        'PORT': os.getenv('DB_PORT', '5432'),
        'CONN_MAX_AGE': 600,
        'OPTIONS': {
            **COMMON_DB_SETTINGS['OPTIONS'],
            'sslmode': 'verify-full',
            'sslrootcert': str(BASE_DIR / 'certs' / 'db-ca-bundle.pem'),
        },
    }


def _require_remote_vars(environment: str) -> None:
    missing_vars = [var for var in REQUIRED_REMOTE_VARS if not os.getenv(var)]

    if missing_vars:
        raise ValueError(
            f"Missing required environment variables for {environment}: "
            f"{', '.join(missing_vars)}"
        )
