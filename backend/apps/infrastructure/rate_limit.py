# apps/infrastructure/rate_limit.py
"""
Rate Limiting Configuration

Per-environment request rates for RateLimitMiddleware and helpers for
reading rate strings such as "100/min".
"""
from typing import Dict, Tuple

PERIOD_SECONDS = {
    "s": 1,
    "sec": 1,
    "second": 1,
    "m": 60,
    "min": 60,
    "minute": 60,
    "h": 3600,
    "hour": 3600,
    "d": 86400,
    "day": 86400,
}

RATE_LIMIT_CONFIGS = {
    "test": {
        "enabled": True,
        "anon_rate": "1000/min",
        "user_rate": "10000/hour",
    },
    "development": {
        "enabled": True,
        "anon_rate": "100/min",  # Per-IP, covers the sign-in page
        "user_rate": "1000/hour",
    },
    "staging": {
        "enabled": True,
        "anon_rate": "100/min",
        "user_rate": "1000/hour",
    },
    "production": {
        "enabled": True,
        "anon_rate": "60/min",
        "user_rate": "2000/hour",
    },
}


def get_rate_limit_config(environment: str) -> Dict:
    """
    Get rate limit configuration for environment

    Args:
        environment: Environment name (test, development, staging, production)

    Returns:
        Configuration dictionary
    """
    return RATE_LIMIT_CONFIGS.get(environment, RATE_LIMIT_CONFIGS["development"])


def parse_rate(rate_string: str) -> Tuple[int, str]:
    """
    Parse rate string like "100/min" into (100, "min")

    Malformed strings fall back to (100, "min").
    """
    try:
        number, period = rate_string.split("/")
        return int(number), period
    except (ValueError, AttributeError):
        return 100, "min"


def period_seconds(period: str) -> int:
    """Length of a rate period in seconds, 60 for unknown periods"""
    return PERIOD_SECONDS.get(period, 60)


def format_retry_after(rate_string: str) -> int:
    """Retry-After header value in seconds for a rate string"""
    _, period = parse_rate(rate_string)
    return period_seconds(period)
