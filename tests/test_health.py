"""Integration tests for health check endpoints."""

from httpx import AsyncClient

from aiflow import __version__


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200

    async def test_health_body(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.json() == {
            "status": "ok",
            "message": "AI Flow Runner Backend is running",
        }


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    async def test_readiness_reports_checks(self, client: AsyncClient) -> None:
        response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert set(data["checks"]) == {"handler", "api_key", "book_content"}
        assert data["version"] == __version__

    async def test_not_ready_before_startup(self, client: AsyncClient) -> None:
        """Lifespan has not run under the test transport."""
        response = await client.get("/health/ready")

        data = response.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["handler"] == "not_initialized"


class TestLivenessEndpoint:
    """Tests for /health/live endpoint."""

    async def test_liveness_returns_alive(self, client: AsyncClient) -> None:
        response = await client.get("/health/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}


class TestCORS:
    """Tests for CORS headers."""

    async def test_preflight_allowed(self, client: AsyncClient) -> None:
        response = await client.options(
            "/chat",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers
