# backend/apps/core/views.py
"""
Core views: API root and health checks
"""
import logging
import time

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.cache import never_cache
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

logger = logging.getLogger(__name__)

SLOW_QUERY_THRESHOLD_MS = 100


@extend_schema(
    tags=["Health"],
    summary="Database health check",
    description="Check if database connection is healthy and measure latency.",
    responses={
        200: OpenApiTypes.OBJECT,
        503: OpenApiTypes.OBJECT,
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
@never_cache
def database_health_check(request):
    """
    Database health check endpoint for load balancers and monitoring.

    Response format:
        200 {"status": "healthy", "latency_ms": 12, "database": "..."}
        503 {"status": "unhealthy", "error": "...", "latency_ms": 12}
    """
    started = time.perf_counter()

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.error(
            f"Database health check failed: {e}",
            extra={"latency_ms": latency_ms},
            exc_info=True,
        )
        return JsonResponse(
            {"status": "unhealthy", "error": str(e), "latency_ms": latency_ms},
            status=503,
        )

    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    if latency_ms > SLOW_QUERY_THRESHOLD_MS:
        logger.warning(f"Database health check latency is high: {latency_ms}ms")

    return JsonResponse(
        {
            "status": "healthy",
            "latency_ms": latency_ms,
            "database": str(connection.settings_dict.get("NAME")),
        },
        status=200,
    )


def api_root(request):
    """API root endpoint showing available endpoints"""
    return JsonResponse(
        {
            "message": "Prompt Manager API",
            "version": "1.0",
            "endpoints": {
                "health": "/api/health/db",
                "prompts": "/api/prompts/",
                "search": "/api/prompts/search/?q=",
                "tags": "/api/tags/",
                "folders": "/api/folders/",
                "dashboard": "/api/dashboard/",
                "schema": "/api/schema/",
                "admin": "/admin/",
            },
        }
    )
