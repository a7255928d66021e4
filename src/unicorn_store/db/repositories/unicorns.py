from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from unicorn_store.db.models import Unicorn


class UnicornRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str | None,
        age: str | None,
        size: str | None,
        type: str | None,
    ) -> Unicorn:
        unicorn = Unicorn(name, age, size, type)
        self._session.add(unicorn)
        # Flush assigns the generated id before the caller commits.
        await self._session.flush()
        return unicorn

    async def get(self, unicorn_id: str) -> Unicorn | None:
        return await self._session.get(Unicorn, unicorn_id)

    async def list_all(self) -> list[Unicorn]:
        # Full table; the route contract has no pagination.
        stmt = select(Unicorn).order_by(Unicorn.name, Unicorn.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def update(
        self,
        unicorn_id: str,
        *,
        name: str | None,
        age: str | None,
        size: str | None,
        type: str | None,
    ) -> Unicorn | None:
        # Full replacement of the descriptive fields; the id never changes.
        unicorn = await self._session.get(Unicorn, unicorn_id, with_for_update=True)
        if unicorn is None:
            return None
        unicorn.name = name
        unicorn.age = age
        unicorn.size = size
        unicorn.type = type
        await self._session.flush()
        return unicorn

    async def delete(self, unicorn_id: str) -> Unicorn | None:
        unicorn = await self._session.get(Unicorn, unicorn_id)
        if unicorn is None:
            return None
        await self._session.delete(unicorn)
        await self._session.flush()
        return unicorn
