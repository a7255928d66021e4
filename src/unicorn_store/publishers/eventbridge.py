"""
unicorn_store.publishers.eventbridge

EventBridge publisher for unicorn lifecycle events.

Responsibilities:
- Build the boto3 `events` client from settings (local endpoint / static region).
- Send one `PutEvents` entry per change; translate AWS failures into `PublisherError`.
"""

from __future__ import annotations

import enum
import json
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from unicorn_store.db.models import Unicorn
from unicorn_store.errors import PublisherError
from unicorn_store.observability.logging import get_logger
from unicorn_store.settings import Settings

log = get_logger(__name__)


class UnicornEventType(enum.StrEnum):
    created = "UNICORN_CREATED"
    updated = "UNICORN_UPDATED"
    deleted = "UNICORN_DELETED"


class EventPublisher(Protocol):
    async def publish(self, unicorn: Unicorn, event_type: UnicornEventType) -> None: ...


def create_events_client(settings: Settings) -> Any:
    # Empty settings fall through to the default AWS credential/region chain.
    return boto3.client(
        "events",
        endpoint_url=settings.aws_local_endpoint or None,
        region_name=settings.aws_region or None,
    )


class UnicornPublisher:
    def __init__(self, *, client: Any, event_bus_name: str, source: str) -> None:
        self._client = client
        self._event_bus_name = event_bus_name
        self._source = source

    @classmethod
    def from_settings(cls, settings: Settings) -> UnicornPublisher:
        return cls(
            client=create_events_client(settings),
            event_bus_name=settings.event_bus_name,
            source=settings.event_source,
        )

    async def publish(self, unicorn: Unicorn, event_type: UnicornEventType) -> None:
        # boto3 is blocking; keep it off the event loop.
        await run_in_threadpool(self._put_event, unicorn, event_type)

    def _put_event(self, unicorn: Unicorn, event_type: UnicornEventType) -> None:
        entry = {
            "Source": self._source,
            "DetailType": event_type.value,
            "EventBusName": self._event_bus_name,
            "Detail": json.dumps(unicorn.to_dict()),
        }
        try:
            response = self._client.put_events(Entries=[entry])
        except (BotoCoreError, ClientError) as e:
            log.error("eventbridge.put_events.error", event_type=event_type.value, error=str(e))
            raise PublisherError(f"failed to publish {event_type.value}") from e

        if response.get("FailedEntryCount", 0):
            failed = [e for e in response.get("Entries", []) if e.get("ErrorCode")]
            log.error("eventbridge.put_events.failed_entries", entries=failed)
            raise PublisherError(f"EventBridge rejected {event_type.value}")

        log.info("eventbridge.put_events", event_type=event_type.value, unicorn_id=unicorn.id)


# --- Module Notes -----------------------------------------------------------
# With `otel_instrument_aws_sdk` enabled the PutEvents call is traced as a child of
# the current request span (see `api.app`).
