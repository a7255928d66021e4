"""
unicorn_store.observability.telemetry

OpenTelemetry tracer/meter provider construction.

Responsibilities:
- Parse `OTEL_RESOURCE_ATTRIBUTES` into resource attributes (skipping malformed pairs).
- Build tracer and meter providers exporting over OTLP/gRPC.
- Hand the result back as an explicit `Telemetry` handle with a flush/shutdown lifecycle.
- Optionally register the handle as the process-wide default, at most once.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from urllib.parse import unquote

from opentelemetry import metrics, propagate, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.extension.aws.trace import AwsXRayIdGenerator
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import (
    SERVICE_NAME,
    TELEMETRY_SDK_LANGUAGE,
    TELEMETRY_SDK_NAME,
    TELEMETRY_SDK_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.version import __version__ as sdk_version

from unicorn_store import __version__
from unicorn_store.observability.logging import get_logger
from unicorn_store.observability.propagation import build_propagator
from unicorn_store.settings import Settings

log = get_logger(__name__)

INSTRUMENTATION_NAME = "unicorn_store"

_registration_lock = threading.Lock()
_registered: Telemetry | None = None


def parse_resource_attributes(raw: str | None) -> dict[str, str]:
    """
    Parse `key=value,key2=value2` into a dict.

    Values are split on the first `=` and percent-decoded, matching the
    OpenTelemetry env var format. Pairs without `=` or with an empty key are
    skipped with a warning rather than failing startup.
    """

    attributes: dict[str, str] = {}
    if not raw:
        return attributes

    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            log.warning("otel.resource_attribute.skipped", pair=item)
            continue
        attributes[key] = unquote(value.strip())
    return attributes


def build_resource(settings: Settings) -> Resource:
    """
    Resource for both providers; `Settings` is the only source of attributes.

    Built without `Resource.create`, whose env detector re-reads
    `OTEL_RESOURCE_ATTRIBUTES` behind the settings object. `service.name`
    precedence: `OTEL_SERVICE_NAME`, then `service.name` in the attribute
    string, then `settings.service_name`.
    """

    attributes: dict[str, str] = {
        TELEMETRY_SDK_LANGUAGE: "python",
        TELEMETRY_SDK_NAME: "opentelemetry",
        TELEMETRY_SDK_VERSION: sdk_version,
        SERVICE_NAME: settings.service_name,
    }
    attributes.update(parse_resource_attributes(settings.otel_resource_attributes))
    if settings.otel_service_name:
        attributes[SERVICE_NAME] = settings.otel_service_name
    return Resource(attributes)


@dataclass(slots=True)
class Telemetry:
    resource: Resource
    tracer_provider: TracerProvider
    meter_provider: MeterProvider
    propagator: TextMapPropagator
    tracer: trace.Tracer = field(init=False)
    meter: metrics.Meter = field(init=False)
    _shut_down: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.tracer = self.tracer_provider.get_tracer(INSTRUMENTATION_NAME, __version__)
        self.meter = self.meter_provider.get_meter(INSTRUMENTATION_NAME, __version__)

    def force_flush(self, timeout_millis: int = 30_000) -> bool:
        traces_ok = self.tracer_provider.force_flush(timeout_millis)
        metrics_ok = self.meter_provider.force_flush(timeout_millis)
        return traces_ok and metrics_ok

    def shutdown(self) -> None:
        # Both SDK providers warn when shut down twice.
        if self._shut_down:
            return
        self._shut_down = True
        self.tracer_provider.shutdown()
        self.meter_provider.shutdown()
        log.info("otel.shutdown")


def create_telemetry(
    settings: Settings,
    *,
    span_exporter: SpanExporter | None = None,
    metric_reader: MetricReader | None = None,
) -> Telemetry:
    """
    Build tracer and meter providers for the service.

    Without overrides both signals go to `settings.otel_exporter_otlp_endpoint`
    over OTLP/gRPC. Exporter failures are logged and retried by the SDK's
    background workers; they never propagate to callers.
    """

    endpoint = settings.otel_exporter_otlp_endpoint
    resource = build_resource(settings)

    if span_exporter is None:
        span_exporter = OTLPSpanExporter(endpoint=endpoint)
    tracer_provider = TracerProvider(resource=resource, id_generator=AwsXRayIdGenerator())
    tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))

    if metric_reader is None:
        metric_reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=endpoint),
            export_interval_millis=settings.otel_metric_export_interval_ms,
        )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])

    log.info(
        "otel.configured",
        endpoint=endpoint,
        resource=dict(resource.attributes),
    )
    return Telemetry(
        resource=resource,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
        propagator=build_propagator(),
    )


def register_global(telemetry: Telemetry) -> bool:
    """
    Install `telemetry` as the process-wide provider/propagator for third-party
    instrumentation. Returns False (and logs) if a handle was already registered.
    """

    global _registered
    with _registration_lock:
        if _registered is not None:
            log.warning(
                "otel.register_global.skipped",
                reason="telemetry already registered for this process",
            )
            return False
        trace.set_tracer_provider(telemetry.tracer_provider)
        metrics.set_meter_provider(telemetry.meter_provider)
        propagate.set_global_textmap(telemetry.propagator)
        _registered = telemetry
    return True


# --- Module Notes -----------------------------------------------------------
# Application code takes the `Telemetry` handle from `create_app`; the global
# registration only exists for libraries that look providers up by themselves
# (e.g. botocore instrumentation when no provider is passed).
