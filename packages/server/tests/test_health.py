"""
Health check endpoint and middleware tests.
"""

import pytest
import structlog
from httpx import AsyncClient

from bizportal.core.logging import configure_logging
from bizportal.core.middleware import SECURITY_HEADERS


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health endpoint should return status ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_ready_check(client: AsyncClient):
    """Ready endpoint should return status ready."""
    response = await client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


@pytest.mark.asyncio
async def test_security_headers_present(client: AsyncClient):
    response = await client.get("/health")
    for header, value in SECURITY_HEADERS.items():
        assert response.headers.get(header) == value


@pytest.mark.asyncio
async def test_request_id_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient):
    response = await client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
async def test_unknown_route_uses_message_envelope(client: AsyncClient):
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert "message" in response.json()


def test_configure_logging_filters_below_level(capsys):
    configure_logging("warning", "console")
    log = structlog.get_logger()
    log.info("portal.quiet_event")
    log.warning("portal.loud_event")
    out = capsys.readouterr().out
    assert "portal.loud_event" in out
    assert "portal.quiet_event" not in out

    configure_logging("warning", "json")
    structlog.get_logger().error("portal.json_event", detail="x")
    assert '"event": "portal.json_event"' in capsys.readouterr().out
