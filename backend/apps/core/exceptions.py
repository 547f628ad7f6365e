# backend/apps/core/exceptions.py
"""
API error mapping

Domain exceptions raised by the services become JSON responses of the
form {"error": message}. Everything else goes through DRF's default
handler. Like DRF, a handled error rolls back the request transaction.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from apps.domain.models import (
    ConflictError,
    DomainException,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain exception, 400 for unmapped subclasses"""
    for exc_type, code in DOMAIN_ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER that understands domain exceptions"""
    if not isinstance(exc, DomainException):
        return exception_handler(exc, context)

    code = status_for(exc)
    view = context.get("view")
    view_name = getattr(view, "__name__", view.__class__.__name__) if view else "unknown"

    if code == status.HTTP_401_UNAUTHORIZED:
        logger.warning(f"Unauthorized call to {view_name}: {exc}")
    else:
        logger.info(f"{exc.__class__.__name__} in {view_name}: {exc}")

    set_rollback()
    return Response({"error": str(exc)}, status=code)
