"""Tests for health checks and response headers."""

import pytest
from httpx import AsyncClient


@pytest.mark.api
@pytest.mark.asyncio
class TestHealth:

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["service"] == "teagarden-cms"

    async def test_security_headers(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    async def test_unknown_route_uses_error_envelope(self, client: AsyncClient):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "HTTP_404"

    async def test_validation_error_envelope(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/harvest-records", json={"fresh_leaf_weight_kg": "heavy"}
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
