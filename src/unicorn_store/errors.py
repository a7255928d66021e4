"""
unicorn_store.errors

Domain error types.

Responsibilities:
- Give the service layer errors that routers map onto HTTP status codes.
"""

from __future__ import annotations


class UnicornStoreError(Exception):
    """Base class for errors raised by the unicorn store service layer."""


class UnicornNotFoundError(UnicornStoreError):
    def __init__(self, unicorn_id: str) -> None:
        super().__init__(f"unicorn not found: {unicorn_id}")
        self.unicorn_id = unicorn_id


class PublisherError(UnicornStoreError):
    """Raised when a domain event could not be delivered to EventBridge."""


# --- Module Notes -----------------------------------------------------------
# Telemetry failures are deliberately absent here: they never reach request handlers.
