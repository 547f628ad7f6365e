# apps/core/middleware.py
"""
Request Middleware

RateLimitMiddleware: per-user / per-IP request limits with custom headers.
SessionGateMiddleware: every non-public path requires a valid session.
"""
import logging

from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from apps.core.auth import SIGN_IN_URL, SIGN_UP_URL, has_valid_session
from apps.infrastructure.rate_limit import (
    format_retry_after,
    get_rate_limit_config,
    parse_rate,
    period_seconds,
)

logger = logging.getLogger(__name__)


class RateLimitMiddleware(MiddlewareMixin):
    """
    Middleware for global rate limiting

    Tracks requests per IP and, once signed in, per user.
    """

    sync_capable = True
    async_capable = False

    skip_paths = (
        "/admin/",
        "/static/",
        "/media/",
        "/api/health/",
    )

    def __init__(self, get_response):
        super().__init__(get_response)
        self.config = get_rate_limit_config(settings.ENVIRONMENT)
        self.enabled = self.config.get("enabled", True)

    def process_request(self, request):
        """Check rate limits before processing request"""
        if not self.enabled or self._should_skip_rate_limit(request):
            return None

        identifier = self._get_identifier(request)

        if self._is_rate_limited(identifier):
            return self._rate_limit_response(identifier, request)

        self._increment_counter(identifier)
        return None

    def process_response(self, request, response):
        """Add rate limit headers to response"""
        if not self.enabled or self._should_skip_rate_limit(request):
            return response

        rate_info = self._get_rate_info(self._get_identifier(request))

        response["X-RateLimit-Limit"] = rate_info["limit"]
        response["X-RateLimit-Remaining"] = rate_info["remaining"]
        response["X-RateLimit-Reset"] = rate_info["reset"]

        return response

    def _should_skip_rate_limit(self, request):
        return request.path.startswith(self.skip_paths)

    def _get_identifier(self, request):
        """Get unique identifier for rate limiting"""
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return f"user:{user.id}"

        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            ip = x_forwarded_for.split(",")[0].strip()
        else:
            ip = request.META.get("REMOTE_ADDR")

        return f"ip:{ip}"

    def _rate_string(self, identifier):
        if identifier.startswith("user:"):
            return self.config.get("user_rate", "1000/hour")
        return self.config.get("anon_rate", "100/min")

    def _cache_key(self, identifier):
        _, period = parse_rate(self._rate_string(identifier))
        return f"rate_limit:{identifier}:{period}"

    def _is_rate_limited(self, identifier):
        limit, _ = parse_rate(self._rate_string(identifier))
        return cache.get(self._cache_key(identifier), 0) >= limit

    def _increment_counter(self, identifier):
        """Start the window on first request, then count atomically"""
        _, period = parse_rate(self._rate_string(identifier))
        cache_key = self._cache_key(identifier)

        if cache.add(cache_key, 1, timeout=period_seconds(period)):
            return
        try:
            cache.incr(cache_key)
        except ValueError:
            # Window expired between add() and incr()
            cache.set(cache_key, 1, timeout=period_seconds(period))

    def _get_rate_info(self, identifier):
        """Get current rate limit info for headers"""
        rate_string = self._rate_string(identifier)
        limit, _ = parse_rate(rate_string)
        current_count = cache.get(self._cache_key(identifier), 0)

        return {
            "limit": limit,
            "remaining": max(0, limit - current_count),
            "reset": format_retry_after(rate_string),
        }

    def _rate_limit_response(self, identifier, request):
        """Return 429 Rate Limited response"""
        rate_string = self._rate_string(identifier)
        retry_after = format_retry_after(rate_string)

        logger.warning(
            f"Rate limit exceeded: {identifier} on {request.path} "
            f"({request.method})"
        )

        response = JsonResponse(
            {
                "error": "Rate limit exceeded",
                "message": f"Too many requests. Please try again in {retry_after} seconds.",
                "retry_after": retry_after,
            },
            status=429,
        )

        response["Retry-After"] = str(retry_after)
        response["X-RateLimit-Limit"] = parse_rate(rate_string)[0]
        response["X-RateLimit-Remaining"] = 0
        response["X-RateLimit-Reset"] = retry_after

        return response


class SessionGateMiddleware(MiddlewareMixin):
    """
    Require a valid session on every non-public path

    Pages redirect to the sign-in page with ?next=; API calls get a 401
    JSON body. Must run after AuthenticationMiddleware.
    """

    sync_capable = True
    async_capable = False

    public_prefixes = (
        "/static/",
        "/media/",
        "/admin/",
        "/api/health/",
    )
    public_paths = (
        "/favicon.ico",
        "/robots.txt",
        "/manifest.json",
        SIGN_IN_URL,
        SIGN_UP_URL,
    )

    def process_request(self, request):
        if self._is_public(request.path) or has_valid_session(request):
            return None

        if request.path.startswith("/api/"):
            logger.warning(f"Rejected API request without session: {request.method} {request.path}")
            return JsonResponse({"error": "Unauthorized"}, status=401)

        logger.info(f"Redirecting {request.path} to sign-in")
        return redirect_to_login(request.get_full_path(), SIGN_IN_URL)

    def _is_public(self, path):
        if path.startswith(self.public_prefixes):
            return True
        return path.rstrip("/") in self.public_paths
