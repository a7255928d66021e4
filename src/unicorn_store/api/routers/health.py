"""
unicorn_store.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness check (`/healthz`).
- Provide readiness check (`/readyz`) gated on the store's DB and its table.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from unicorn_store.api.deps import db_session
from unicorn_store.db.models import Unicorn
from unicorn_store.observability.logging import get_logger

router = APIRouter()
log = get_logger(__name__)


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: the event loop is serving HTTP; no dependency is touched.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str | int]:
    # Readiness: the `unicorns` table must be queryable (migrations applied).
    try:
        count = (await session.execute(select(func.count()).select_from(Unicorn))).scalar_one()
    except SQLAlchemyError as e:
        log.warning("readyz.db_unavailable", error=str(e))
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Database not ready"
        ) from e
    return {"status": "ready", "unicorns": count}


# --- Module Notes -----------------------------------------------------------
# Health checks sit outside `/unicorns`, so they are traced but not counted by the metrics filter.
