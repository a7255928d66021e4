"""
tests.test_telemetry

Telemetry provider construction.

Responsibilities:
- Resource attribute parsing (including malformed pairs) and merging with SDK defaults.
- Endpoint defaults and env overrides.
- Handle lifecycle and once-per-process global registration.
"""

from __future__ import annotations

import pytest
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from unicorn_store.observability.propagation import PrecedenceCompositePropagator
from unicorn_store.observability.telemetry import (
    build_resource,
    create_telemetry,
    parse_resource_attributes,
    register_global,
)
from unicorn_store.settings import DEFAULT_OTLP_ENDPOINT, Settings


def test_parse_resource_attributes() -> None:
    assert parse_resource_attributes("service.name=store,env=prod") == {
        "service.name": "store",
        "env": "prod",
    }


@pytest.mark.parametrize("raw", [None, "", " , ,"])
def test_parse_resource_attributes_empty(raw: str | None) -> None:
    assert parse_resource_attributes(raw) == {}


def test_parse_resource_attributes_skips_malformed_pairs() -> None:
    raw = " team = unicorns ,missing-separator,=orphan,query=a=b,label=hello%20world"
    assert parse_resource_attributes(raw) == {
        "team": "unicorns",
        "query": "a=b",
        "label": "hello world",
    }


def test_resource_merges_attributes_with_defaults() -> None:
    settings = Settings(otel_resource_attributes="service.name=store,env=prod")
    attrs = build_resource(settings).attributes
    assert attrs["service.name"] == "store"
    assert attrs["env"] == "prod"
    assert attrs["telemetry.sdk.language"] == "python"


def test_resource_defaults_service_name_from_settings() -> None:
    attrs = build_resource(Settings(service_name="unicorn-store")).attributes
    assert attrs["service.name"] == "unicorn-store"


def test_resource_attributes_read_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTEL_RESOURCE_ATTRIBUTES", "service.name=store,env=prod")
    settings = Settings()
    assert settings.otel_resource_attributes == "service.name=store,env=prod"
    assert build_resource(settings).attributes["env"] == "prod"


def test_process_env_does_not_leak_past_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTEL_RESOURCE_ATTRIBUTES", "leak=1,service.name=from-env")
    attrs = build_resource(Settings(otel_resource_attributes="env=x")).attributes
    assert attrs["env"] == "x"
    assert "leak" not in attrs
    assert attrs["service.name"] == "unicorn-store"


def test_service_name_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    from_attributes = Settings(otel_resource_attributes="service.name=from-attrs")
    assert build_resource(from_attributes).attributes["service.name"] == "from-attrs"

    monkeypatch.setenv("OTEL_SERVICE_NAME", "from-otel-env")
    settings = Settings(otel_resource_attributes="service.name=from-attrs")
    assert settings.otel_service_name == "from-otel-env"
    assert build_resource(settings).attributes["service.name"] == "from-otel-env"


def test_exporter_endpoint_defaults_to_local_collector() -> None:
    assert Settings().otel_exporter_otlp_endpoint == DEFAULT_OTLP_ENDPOINT == "http://localhost:4317"


def test_exporter_endpoint_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317")
    assert Settings().otel_exporter_otlp_endpoint == "http://collector:4317"


def test_create_telemetry_exports_spans_and_metrics() -> None:
    spans = InMemorySpanExporter()
    reader = InMemoryMetricReader()
    telemetry = create_telemetry(
        Settings(otel_resource_attributes="env=test"), span_exporter=spans, metric_reader=reader
    )
    try:
        assert isinstance(telemetry.propagator, PrecedenceCompositePropagator)

        with telemetry.tracer.start_as_current_span("work"):
            pass
        telemetry.meter.create_counter("work.count").add(3)

        assert telemetry.force_flush()
        finished = spans.get_finished_spans()
        assert [s.name for s in finished] == ["work"]
        assert finished[0].resource.attributes["env"] == "test"

        data = reader.get_metrics_data()
        names = [
            m.name
            for rm in data.resource_metrics
            for sm in rm.scope_metrics
            for m in sm.metrics
        ]
        assert names == ["work.count"]
    finally:
        telemetry.shutdown()
        # Second shutdown is a no-op.
        telemetry.shutdown()


def test_register_global_only_once_per_process() -> None:
    first = create_telemetry(
        Settings(), span_exporter=InMemorySpanExporter(), metric_reader=InMemoryMetricReader()
    )
    second = create_telemetry(
        Settings(), span_exporter=InMemorySpanExporter(), metric_reader=InMemoryMetricReader()
    )
    try:
        # The first call may already have happened elsewhere in the process.
        register_global(first)
        assert register_global(second) is False
    finally:
        first.shutdown()
        second.shutdown()
