"""
unicorn_store.services.unicorn_service

Unicorn lifecycle service (transaction + event owner).

Responsibilities:
- Create, read, update, and delete unicorns through `UnicornRepo`.
- Commit before publishing so events only describe persisted state.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from unicorn_store.db.models import Unicorn
from unicorn_store.db.repositories.unicorns import UnicornRepo
from unicorn_store.errors import UnicornNotFoundError
from unicorn_store.observability.logging import get_logger
from unicorn_store.publishers.eventbridge import EventPublisher, UnicornEventType

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UnicornFields:
    name: str | None = None
    age: str | None = None
    size: str | None = None
    type: str | None = None


class UnicornService:
    def __init__(self, *, session: AsyncSession, publisher: EventPublisher) -> None:
        self._session = session
        self._publisher = publisher
        self._unicorns = UnicornRepo(session)

    async def create_unicorn(self, fields: UnicornFields) -> Unicorn:
        unicorn = await self._unicorns.create(
            name=fields.name, age=fields.age, size=fields.size, type=fields.type
        )
        await self._session.commit()
        log.info("unicorn.created", unicorn_id=unicorn.id)
        await self._publisher.publish(unicorn, UnicornEventType.created)
        return unicorn

    async def get_unicorn(self, unicorn_id: str) -> Unicorn:
        unicorn = await self._unicorns.get(unicorn_id)
        if unicorn is None:
            raise UnicornNotFoundError(unicorn_id)
        return unicorn

    async def list_unicorns(self) -> list[Unicorn]:
        return await self._unicorns.list_all()

    async def update_unicorn(self, unicorn_id: str, fields: UnicornFields) -> Unicorn:
        unicorn = await self._unicorns.update(
            unicorn_id, name=fields.name, age=fields.age, size=fields.size, type=fields.type
        )
        if unicorn is None:
            raise UnicornNotFoundError(unicorn_id)
        await self._session.commit()
        log.info("unicorn.updated", unicorn_id=unicorn.id)
        await self._publisher.publish(unicorn, UnicornEventType.updated)
        return unicorn

    async def delete_unicorn(self, unicorn_id: str) -> None:
        unicorn = await self._unicorns.delete(unicorn_id)
        if unicorn is None:
            raise UnicornNotFoundError(unicorn_id)
        await self._session.commit()
        log.info("unicorn.deleted", unicorn_id=unicorn_id)
        await self._publisher.publish(unicorn, UnicornEventType.deleted)


# --- Module Notes -----------------------------------------------------------
# A publisher failure after commit leaves the row in place; the router reports 500
# and the caller may retry the write.
