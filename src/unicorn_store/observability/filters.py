"""
unicorn_store.observability.filters

Path-scoped metrics middleware.

Responsibilities:
- Select requests under a configured path prefix (default `/unicorns`).
- Invoke `RequestMetrics.record` exactly once per selected request, whatever the outcome.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from unicorn_store.observability.metrics import RequestMetrics

UNMATCHED_ROUTE = "<unmatched>"


class MetricsFilterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, path_prefix: str, metrics: RequestMetrics) -> None:
        super().__init__(app)
        self._prefix = path_prefix.rstrip("/") or "/"
        self._metrics = metrics

    def matches(self, path: str) -> bool:
        if self._prefix == "/":
            return True
        return path == self._prefix or path.startswith(self._prefix + "/")

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.matches(request.url.path):
            return await call_next(request)

        started = time.perf_counter()
        # Unhandled errors are rendered as 500 by the outer ServerErrorMiddleware.
        status_code = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            self._metrics.record(
                method=request.method,
                route=_route_template(request),
                status_code=status_code,
                duration_s=time.perf_counter() - started,
            )


def _route_template(request: Request) -> str:
    # Routing writes the matched route into the shared scope.
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


# --- Module Notes -----------------------------------------------------------
# Route templates (`/unicorns/{unicorn_id}`) and the single `<unmatched>` label keep
# metric cardinality bounded.
