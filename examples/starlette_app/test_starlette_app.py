"""Tests for the Starlette integration example.

Skips gracefully if starlette or httpx are not installed.
"""

import pytest

starlette = pytest.importorskip("starlette")
httpx = pytest.importorskip("httpx")

from starlette.testclient import TestClient


class TestStarletteApp:
    """Verify the three render outcomes over HTTP."""

    @pytest.fixture
    def client(self, example_app) -> TestClient:
        """Create a test client from the example Starlette app."""
        return TestClient(example_app.app)

    def test_dashboard_returns_html(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    def test_dashboard_has_content(self, client: TestClient) -> None:
        response = client.get("/")
        assert "<h1>Dashboard</h1>" in response.text
        assert "<li>Revenue: $1.2M</li><li>Users: 45K</li>" in response.text
        assert "<p>3 metrics</p>" in response.text

    def test_failed_marker_is_500(self, client: TestClient) -> None:
        response = client.get("/crash")
        assert response.status_code == 500
        assert response.json() == {"status": 500, "message": "Internal Server Error."}

    def test_unknown_scheme_is_404(self, client: TestClient) -> None:
        response = client.get("/themed/unknown")
        assert response.status_code == 404
        assert response.json()["message"] == "Html scheme not found."
