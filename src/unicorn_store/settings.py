"""
unicorn_store.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Read the standard OpenTelemetry env vars alongside service-prefixed ones.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"


class Settings(BaseSettings):
    """
    Service settings:
    - `UNICORN_*` env vars for service knobs
    - Unprefixed `OTEL_*` env vars for the telemetry SDK conventions
    """

    model_config = SettingsConfigDict(
        env_prefix="UNICORN_",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "unicorn-store"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./unicorns.db"

    # Telemetry
    otel_resource_attributes: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OTEL_RESOURCE_ATTRIBUTES", "otel_resource_attributes"),
    )
    otel_service_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OTEL_SERVICE_NAME", "otel_service_name"),
    )
    otel_exporter_otlp_endpoint: str = Field(
        default=DEFAULT_OTLP_ENDPOINT,
        validation_alias=AliasChoices(
            "OTEL_EXPORTER_OTLP_ENDPOINT", "otel_exporter_otlp_endpoint"
        ),
    )
    otel_metric_export_interval_ms: int = Field(default=60_000, ge=1)
    # Only the first registration per process takes effect (see observability.telemetry).
    otel_register_global: bool = True
    otel_instrument_aws_sdk: bool = True
    metrics_path_prefix: str = "/unicorns"

    # AWS (`aws.local.endpoint` / `cloud.aws.region.static`); empty means SDK defaults.
    aws_local_endpoint: str = ""
    aws_region: str = ""
    event_bus_name: str = "unicorns"
    event_source: str = "com.unicorn.store"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `OTEL_EXPORTER_OTLP_ENDPOINT` is read here rather than by the exporter itself so
# the composition root passes one explicit endpoint to both trace and metric exporters.
