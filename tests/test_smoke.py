"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and the DB readiness check works in test mode.
- Ensure readiness fails closed when the schema has not been migrated.
"""

from __future__ import annotations

import httpx
import pytest

from tests.conftest import RecordingPublisher
from unicorn_store.api.app import create_app
from unicorn_store.api.routers.unicorns import WELCOME_MESSAGE
from unicorn_store.observability.telemetry import Telemetry
from unicorn_store.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "unicorns": 0}


@pytest.mark.asyncio
async def test_welcome_and_request_id(client: httpx.AsyncClient) -> None:
    r = await client.get("/", headers={"x-request-id": "req-123"})
    assert r.status_code == 200
    assert r.text == WELCOME_MESSAGE
    assert r.headers["x-request-id"] == "req-123"

    r = await client.get("/")
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_readyz_unavailable_without_schema(
    settings: Settings,
    telemetry: Telemetry,
    publisher: RecordingPublisher,
) -> None:
    # Prod skips `create_all`; without migrations the table is missing.
    app = create_app(
        settings=settings.model_copy(update={"env": "prod"}),
        telemetry=telemetry,
        publisher=publisher,
    )
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/healthz")).status_code == 200
            r = await client.get("/readyz")
            assert r.status_code == 503
            assert r.json()["detail"] == "Database not ready"
