"""
Tests for health check endpoint.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_endpoint_returns_200(test_client: AsyncClient):
    response = await test_client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_endpoint_reports_status_and_version(test_client: AsyncClient):
    data = (await test_client.get("/health")).json()
    assert data["status"] == "healthy"
    assert isinstance(data["version"], str) and data["version"]


@pytest.mark.asyncio
async def test_responses_carry_timing_header(test_client: AsyncClient):
    response = await test_client.get("/health")
    assert "x-response-time-ms" in response.headers
