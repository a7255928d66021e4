"""
unicorn_store.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for DB sessions and the unicorn service.
- Encapsulate app.state access patterns (sessionmaker/publisher).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from unicorn_store.publishers.eventbridge import EventPublisher
from unicorn_store.services.unicorn_service import UnicornService


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the lifespan of `unicorn_store.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def publisher_from_app(request: Request) -> EventPublisher:
    return request.app.state.publisher  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def unicorn_service(
    session: AsyncSession = Depends(db_session),
    publisher: EventPublisher = Depends(publisher_from_app),
) -> UnicornService:
    return UnicornService(session=session, publisher=publisher)
