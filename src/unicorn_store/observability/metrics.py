"""
unicorn_store.observability.metrics

Request-level metric instruments.

Responsibilities:
- Create the request counter and duration histogram on a given meter.
- Record one observation per completed request.
"""

from __future__ import annotations

from opentelemetry.metrics import Meter
from opentelemetry.semconv.attributes.http_attributes import (
    HTTP_REQUEST_METHOD,
    HTTP_RESPONSE_STATUS_CODE,
    HTTP_ROUTE,
)

REQUEST_COUNT = "http.server.request.count"
REQUEST_DURATION = "http.server.request.duration"


class RequestMetrics:
    # SDK instruments aggregate under their own locks; instances are shared across requests.
    def __init__(self, meter: Meter) -> None:
        self._requests = meter.create_counter(
            REQUEST_COUNT,
            unit="{request}",
            description="Number of completed HTTP requests.",
        )
        self._duration = meter.create_histogram(
            REQUEST_DURATION,
            unit="s",
            description="Duration of completed HTTP requests.",
        )

    def record(self, *, method: str, route: str, status_code: int, duration_s: float) -> None:
        attributes = {
            HTTP_REQUEST_METHOD: method,
            HTTP_ROUTE: route,
            HTTP_RESPONSE_STATUS_CODE: status_code,
        }
        self._requests.add(1, attributes)
        self._duration.record(duration_s, attributes)
