"""
unicorn_store.api.app

FastAPI app factory for the Unicorn Store service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build telemetry (tracer, meter, propagator) once and hand it to the middleware.
- Initialize and dispose shared infrastructure (DB engine, publisher, instrumentation).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from opentelemetry.instrumentation.botocore import BotocoreInstrumentor

from unicorn_store import __version__
from unicorn_store.api.routers.health import router as health_router
from unicorn_store.api.routers.unicorns import router as unicorns_router
from unicorn_store.db.init_db import init_db
from unicorn_store.db.session import create_engine, create_sessionmaker
from unicorn_store.observability.filters import MetricsFilterMiddleware
from unicorn_store.observability.logging import configure_logging, get_logger
from unicorn_store.observability.metrics import RequestMetrics
from unicorn_store.observability.middleware import RequestContextMiddleware
from unicorn_store.observability.telemetry import Telemetry, create_telemetry, register_global
from unicorn_store.observability.tracing import TracingMiddleware
from unicorn_store.publishers.eventbridge import EventPublisher, UnicornPublisher
from unicorn_store.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    telemetry: Telemetry | None = None,
    publisher: EventPublisher | None = None,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    if telemetry is None:
        telemetry = create_telemetry(settings)
    if settings.otel_register_global:
        register_global(telemetry)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.publisher = (
            publisher if publisher is not None else UnicornPublisher.from_settings(settings)
        )
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)

        instrumentor: BotocoreInstrumentor | None = None
        if settings.otel_instrument_aws_sdk:
            # EventBridge calls become child spans of the request span.
            instrumentor = BotocoreInstrumentor()
            instrumentor.instrument(tracer_provider=telemetry.tracer_provider)
        try:
            yield
        finally:
            if instrumentor is not None:
                instrumentor.uninstrument()
            await engine.dispose()
            # Flushes pending spans/metrics before the exporters close.
            telemetry.shutdown()
            log.info("shutdown")

    app = FastAPI(
        title="Unicorn Store",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware outermost:
    # request context -> tracing -> metrics filter -> routes.
    app.add_middleware(
        MetricsFilterMiddleware,
        path_prefix=settings.metrics_path_prefix,
        metrics=RequestMetrics(telemetry.meter),
    )
    app.add_middleware(
        TracingMiddleware,
        tracer=telemetry.tracer,
        propagator=telemetry.propagator,
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(unicorns_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This is the single composition root: every shared object (telemetry handle, engine,
# publisher) is created here and reaches handlers through app.state or middleware args.
