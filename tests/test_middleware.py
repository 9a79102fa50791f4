"""Middleware tests: request id propagation and JSON error shapes."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Response carries a generated X-Request-Id when none was sent."""
    response = await client.get("/health")
    assert response.headers.get("X-Request-Id")


@pytest.mark.asyncio
async def test_request_id_propagated(client: AsyncClient) -> None:
    """A caller-supplied X-Request-Id is echoed back."""
    response = await client.get("/health", headers={"X-Request-Id": "req-123"})
    assert response.headers["X-Request-Id"] == "req-123"


@pytest.mark.asyncio
async def test_unknown_route_is_json(client: AsyncClient) -> None:
    """Unknown routes answer with a JSON body."""
    response = await client.get("/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_domain_error_shape(client: AsyncClient) -> None:
    """Domain errors carry their status, message and error code."""
    response = await client.get("/api/v1/self-reported-hours/missing", params={"volunteer_id": "vol-1"})
    assert response.status_code == 404
    assert response.json() == {"detail": "Self-reported hours record not found", "error": "not_found"}


@pytest.mark.asyncio
async def test_request_shape_error(client: AsyncClient) -> None:
    """Malformed bodies answer 422 with the request_validation code."""
    response = await client.post(
        "/api/v1/self-reported-hours", params={"volunteer_id": "vol-1"}, json={"hours": 2},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "request_validation"


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """Preflight requests from a configured origin are allowed."""
    response = await client.options(
        "/health",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
