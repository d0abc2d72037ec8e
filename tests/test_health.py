"""
Tests for health check endpoints.
"""
from fastapi.testclient import TestClient


class TestHealth:
    """Tests for health check endpoints."""

    def test_basic_health(self, client: TestClient):
        """Liveness needs no auth and reports a timestamp."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "timestamp" in data

    def test_readiness_checks_database(self, client: TestClient):
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["services"]["database"]["status"] == "ok"

    def test_unknown_route_uses_error_body(self, client: TestClient):
        response = client.get("/no/such/route")

        assert response.status_code == 404
        assert "error" in response.json()
