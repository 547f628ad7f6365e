# apps/core/tests/test_session_gate.py
"""
Tests for the session gate and the auth helpers
"""
import pytest
from django.contrib.auth.models import AnonymousUser
from django.http import HttpResponse
from django.test import Client, RequestFactory

from apps.core.auth import has_valid_session, require_auth, session_required
from apps.domain.models import UnauthorizedError


@pytest.mark.django_db
class TestSessionGateMiddleware:
    def setup_method(self):
        self.client = Client()

    def test_dashboard_without_session_redirects_to_sign_in(self):
        response = self.client.get("/dashboard")

        assert response.status_code == 302
        assert response.url.startswith("/sign-in")
        assert "next=/dashboard" in response.url

    def test_root_redirects_to_sign_in(self):
        response = self.client.get("/")

        assert response.status_code == 302
        assert response.url.startswith("/sign-in")

    def test_api_without_session_returns_401(self):
        response = self.client.get("/api/tags/")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_sign_in_page_is_public(self):
        response = self.client.get("/sign-in")

        assert response.status_code == 200

    def test_well_known_files_are_public(self):
        response = self.client.get("/robots.txt")

        # Not gated; there is simply no such page
        assert response.status_code == 404

    def test_dotted_page_paths_are_gated(self):
        response = self.client.get("/prompts/a.b")

        assert response.status_code == 302
        assert response.url.startswith("/sign-in")

    def test_dotted_api_paths_are_gated(self):
        response = self.client.get("/api/tags/export.json")

        assert response.status_code == 401

    def test_sign_up_page_is_public(self):
        response = self.client.get("/sign-up")

        assert response.status_code == 200

    def test_inactive_user_is_rejected(self, user):
        self.client.force_login(user)
        user.is_active = False
        user.save()

        response = self.client.get("/dashboard")

        assert response.status_code == 302

    def test_signed_in_user_passes(self, user):
        self.client.force_login(user)

        response = self.client.get("/dashboard")

        assert response.status_code == 200


@pytest.mark.django_db
class TestAuthHelpers:
    def setup_method(self):
        self.factory = RequestFactory()

    def test_has_valid_session(self, user):
        request = self.factory.get("/dashboard")
        request.user = user
        assert has_valid_session(request) is True

        request.user = AnonymousUser()
        assert has_valid_session(request) is False

    def test_require_auth_returns_user_id(self, user):
        request = self.factory.get("/api/tags/")
        request.user = user

        assert require_auth(request) == user.id

    def test_require_auth_raises_for_anonymous(self):
        request = self.factory.get("/api/tags/")
        request.user = AnonymousUser()

        with pytest.raises(UnauthorizedError):
            require_auth(request)

    def test_session_required_redirects(self):
        view = session_required(lambda request: HttpResponse("ok"))
        request = self.factory.get("/prompts")
        request.user = AnonymousUser()

        response = view(request)

        assert response.status_code == 302
        assert response.url == "/sign-in?next=/prompts"
