"""
tests.conftest

Shared fixtures for API and observability tests.

Responsibilities:
- Build test settings backed by a per-test SQLite file.
- Provide a telemetry handle exporting to in-memory span/metric sinks.
- Provide a recording publisher in place of EventBridge.
- Run the app lifespan explicitly around an httpx ASGI client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from unicorn_store.api.app import create_app
from unicorn_store.db.models import Unicorn
from unicorn_store.errors import PublisherError
from unicorn_store.observability.telemetry import Telemetry, create_telemetry
from unicorn_store.publishers.eventbridge import UnicornEventType
from unicorn_store.settings import Settings


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list[tuple[UnicornEventType, dict[str, Any]]] = []
        self.fail = False

    async def publish(self, unicorn: Unicorn, event_type: UnicornEventType) -> None:
        if self.fail:
            raise PublisherError("simulated EventBridge outage")
        self.events.append((event_type, unicorn.to_dict()))


def metric_points(reader: InMemoryMetricReader, name: str) -> list[Any]:
    data = reader.get_metrics_data()
    points: list[Any] = []
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if metric.name == name:
                    points.extend(metric.data.data_points)
    return points


@pytest.fixture(autouse=True)
def _clean_otel_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("OTEL_RESOURCE_ATTRIBUTES", "OTEL_EXPORTER_OTLP_ENDPOINT", "OTEL_SERVICE_NAME"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "unicorns.db"


@pytest.fixture
def settings(db_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{db_path}",
        otel_resource_attributes="service.name=unicorn-store-test,deployment.environment=test",
        otel_register_global=False,
        otel_instrument_aws_sdk=False,
    )


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def metric_reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def telemetry(
    settings: Settings,
    span_exporter: InMemorySpanExporter,
    metric_reader: InMemoryMetricReader,
) -> Iterator[Telemetry]:
    handle = create_telemetry(settings, span_exporter=span_exporter, metric_reader=metric_reader)
    yield handle
    handle.shutdown()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest_asyncio.fixture
async def app(
    settings: Settings,
    telemetry: Telemetry,
    publisher: RecordingPublisher,
) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings, telemetry=telemetry, publisher=publisher)
    # httpx ASGITransport does not manage lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # Unhandled handler errors should surface as 500 responses, not test exceptions.
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
