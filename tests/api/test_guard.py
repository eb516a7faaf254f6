"""Tests for the route guard middleware."""

import pytest

from shared.models import Role


class TestRouteGuard:
    """Tests for RouteGuardMiddleware."""

    def test_protected_page_redirects_to_login(self, client):
        response = client.get("/dashboard", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Fdashboard"

    def test_protected_page_with_session_passes(self, client, sign_in):
        """With a session the request reaches routing (no page here, so 404)."""
        sign_in()
        assert client.get("/dashboard", follow_redirects=False).status_code == 404

    def test_admin_page_as_user(self, client, sign_in):
        sign_in(role=Role.USER)
        response = client.get("/admin/users", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/dashboard"

    @pytest.mark.parametrize("role", [Role.STAFF, Role.ADMIN])
    def test_admin_page_as_staff(self, client, sign_in, role):
        sign_in(role=role)
        assert client.get("/admin", follow_redirects=False).status_code == 404

    def test_expired_or_forged_cookie_redirects(self, client):
        client.cookies.set("etu_session", "forged.cookie.value")
        assert client.get("/profile", follow_redirects=False).status_code == 307

    @pytest.mark.parametrize("path", ["/dashboard/ship.png", "/_next/static/chunk.js", "/favicon.ico"])
    def test_static_assets_skip_guard(self, client, path):
        assert client.get(path, follow_redirects=False).status_code == 404

    def test_api_routes_are_not_redirected(self, client):
        """API endpoints answer with JSON errors, not redirects."""
        response = client.get("/api/profile", follow_redirects=False)
        assert response.status_code == 401
