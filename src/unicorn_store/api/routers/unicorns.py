"""
unicorn_store.api.routers.unicorns

Public CRUD endpoints for unicorns.

Responsibilities:
- Validate request bodies and shape responses.
- Delegate to `UnicornService`; map domain errors onto HTTP status codes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from unicorn_store.api.deps import unicorn_service
from unicorn_store.errors import PublisherError, UnicornNotFoundError
from unicorn_store.services.unicorn_service import UnicornFields, UnicornService

router = APIRouter()

WELCOME_MESSAGE = "Welcome to the Unicorn Store!"


class UnicornRequest(BaseModel):
    # `id` may be sent by clients echoing a previous response; it is ignored.
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=256)
    age: str | None = Field(default=None, max_length=64)
    size: str | None = Field(default=None, max_length=64)
    type: str | None = Field(default=None, max_length=128)

    def to_fields(self) -> UnicornFields:
        return UnicornFields(name=self.name, age=self.age, size=self.size, type=self.type)


class UnicornResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    age: str | None
    size: str | None
    type: str | None


def _not_found() -> HTTPException:
    return HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Unicorn not found")


def _publish_failed(action: str) -> HTTPException:
    return HTTPException(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Error {action} unicorn"
    )


@router.get("/", response_class=PlainTextResponse)
async def welcome() -> str:
    return WELCOME_MESSAGE


@router.post("/unicorns", response_model=UnicornResponse, tags=["unicorns"])
async def create_unicorn(
    body: UnicornRequest,
    svc: UnicornService = Depends(unicorn_service),
) -> UnicornResponse:
    try:
        unicorn = await svc.create_unicorn(body.to_fields())
    except PublisherError as e:
        raise _publish_failed("creating") from e
    return UnicornResponse.model_validate(unicorn)


@router.get("/unicorns", response_model=list[UnicornResponse], tags=["unicorns"])
async def list_unicorns(
    svc: UnicornService = Depends(unicorn_service),
) -> list[UnicornResponse]:
    return [UnicornResponse.model_validate(u) for u in await svc.list_unicorns()]


@router.get("/unicorns/{unicorn_id}", response_model=UnicornResponse, tags=["unicorns"])
async def get_unicorn(
    unicorn_id: str,
    svc: UnicornService = Depends(unicorn_service),
) -> UnicornResponse:
    try:
        unicorn = await svc.get_unicorn(unicorn_id)
    except UnicornNotFoundError as e:
        raise _not_found() from e
    return UnicornResponse.model_validate(unicorn)


@router.put("/unicorns/{unicorn_id}", response_model=UnicornResponse, tags=["unicorns"])
async def update_unicorn(
    unicorn_id: str,
    body: UnicornRequest,
    svc: UnicornService = Depends(unicorn_service),
) -> UnicornResponse:
    try:
        unicorn = await svc.update_unicorn(unicorn_id, body.to_fields())
    except UnicornNotFoundError as e:
        raise _not_found() from e
    except PublisherError as e:
        raise _publish_failed("updating") from e
    return UnicornResponse.model_validate(unicorn)


@router.delete("/unicorns/{unicorn_id}", tags=["unicorns"])
async def delete_unicorn(
    unicorn_id: str,
    svc: UnicornService = Depends(unicorn_service),
) -> Response:
    try:
        await svc.delete_unicorn(unicorn_id)
    except UnicornNotFoundError as e:
        raise _not_found() from e
    except PublisherError as e:
        raise _publish_failed("deleting") from e
    return Response(status_code=200)


# --- Module Notes -----------------------------------------------------------
# Every route under `/unicorns` is counted by `observability.filters.MetricsFilterMiddleware`.
