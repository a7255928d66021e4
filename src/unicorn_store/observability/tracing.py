"""
unicorn_store.observability.tracing

Request interceptor creating one server span per inbound HTTP request.

Responsibilities:
- Continue the caller's trace from W3C/X-Ray headers.
- Keep the span current while the handler runs and always end it.
- Never fail a request because tracing failed.
"""

from __future__ import annotations

from opentelemetry import context as otel_context
from opentelemetry import trace
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.semconv.attributes.http_attributes import (
    HTTP_REQUEST_METHOD,
    HTTP_RESPONSE_STATUS_CODE,
    HTTP_ROUTE,
)
from opentelemetry.semconv.attributes.url_attributes import URL_PATH
from opentelemetry.trace import Span, SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from unicorn_store.observability.logging import get_logger

log = get_logger(__name__)


class TracingMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        tracer: trace.Tracer,
        propagator: TextMapPropagator,
    ) -> None:
        super().__init__(app)
        self._tracer = tracer
        self._propagator = propagator

    async def dispatch(self, request: Request, call_next) -> Response:
        span = self._start_span(request)
        if span is None:
            return await call_next(request)

        token = otel_context.attach(trace.set_span_in_context(span))
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            _set_route(span, request)
            span.record_exception(exc)
            span.set_attribute(HTTP_RESPONSE_STATUS_CODE, 500)
            span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
            raise
        else:
            _set_route(span, request)
            span.set_attribute(HTTP_RESPONSE_STATUS_CODE, response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))
            return response
        finally:
            otel_context.detach(token)
            span.end()

    def _start_span(self, request: Request) -> Span | None:
        try:
            parent = self._propagator.extract(carrier=request.headers)
            return self._tracer.start_span(
                request.method,
                context=parent,
                kind=SpanKind.SERVER,
                attributes={
                    HTTP_REQUEST_METHOD: request.method,
                    URL_PATH: request.url.path,
                },
            )
        except Exception:
            log.warning("tracing.span_start_failed", exc_info=True)
            return None


def _set_route(span: Span, request: Request) -> None:
    # The route is only known once the router has matched (inside call_next).
    route = getattr(request.scope.get("route"), "path", None)
    if route:
        span.set_attribute(HTTP_ROUTE, route)
        span.update_name(f"{request.method} {route}")


# --- Module Notes -----------------------------------------------------------
# Raised exceptions are re-raised untouched; Starlette's ServerErrorMiddleware turns
# them into 500 responses outside this middleware.
