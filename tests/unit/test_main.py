"""Unit tests for FastAPI application.

Tests for content_service/main.py - health endpoint and application setup.

Run with:
    pytest tests/unit/test_main.py -v
    pytest tests/unit/test_main.py -v -m fast
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from content_service import __version__
from content_service.main import create_app


@pytest.mark.fast
class TestHealthEndpoint:
    """Tests for health endpoint."""

    def test_health_returns_status(self, client):
        """Test health endpoint returns status."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data == {
            "status": "healthy",
            "version": __version__,
            "index": True,
            "storage_provider": "memory",
        }

    def test_health_degraded_when_index_down(self, client, services):
        """Test health reports degraded when the index is unreachable."""
        services.check_index = AsyncMock(return_value=False)
        data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["index"] is False

    def test_health_needs_no_api_key(self, client):
        assert client.get("/health").status_code == 200


@pytest.mark.fast
class TestAppSetup:
    """Tests for create_app()."""

    def test_docs_enabled_in_debug(self, test_settings, services):
        app = create_app(settings=test_settings, services=services)
        with TestClient(app) as test_client:
            assert test_client.get("/docs").status_code == 200

    def test_docs_disabled_without_debug(self, test_settings, services):
        settings = test_settings.model_copy(update={"DEBUG": False})
        app = create_app(settings=settings, services=services)
        with TestClient(app) as test_client:
            assert test_client.get("/docs").status_code == 404

    def test_builds_and_closes_own_services(self, test_settings):
        """Test the app builds services on startup when none are given."""
        app = create_app(settings=test_settings)
        with TestClient(app) as test_client:
            assert test_client.get("/health").status_code == 200
            assert app.state.services.database is None

    def test_unknown_route(self, client):
        assert client.get("/api/v1/nope").status_code == 404
