# backend/apps/core/auth.py
"""
Session checks

One predicate decides whether a request carries a valid session. The
gate middleware, the page decorator and the service entry points all
call it.
"""
import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth.views import redirect_to_login

from apps.domain.models import UnauthorizedError

logger = logging.getLogger(__name__)

SIGN_IN_URL = settings.LOGIN_URL
SIGN_UP_URL = "/sign-up"


def has_valid_session(request) -> bool:
    """True when the request belongs to an authenticated, active user

    Expired sessions never reach this point: Django's session middleware
    does not load them, so the user is anonymous.
    """
    user = getattr(request, "user", None)
    return bool(user is not None and user.is_authenticated and user.is_active)


def require_auth(request) -> int:
    """
    Return the caller's user id or raise UnauthorizedError

    Raises:
        UnauthorizedError: If the request has no valid session
    """
    if not has_valid_session(request):
        logger.warning(f"Unauthorized access to {request.path}")
        raise UnauthorizedError("Unauthorized")
    return request.user.id


def session_required(view_func):
    """Page decorator that redirects to the sign-in page without a session"""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not has_valid_session(request):
            return redirect_to_login(request.get_full_path(), SIGN_IN_URL)
        return view_func(request, *args, **kwargs)

    return wrapper
