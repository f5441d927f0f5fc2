from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Response, status
from pydantic import TypeAdapter

from app.core.auth import ADMIN, USER, require_role
from app.core.deps import anime_service_dep, json_body_dep
from app.domain.schemas import AnimeBatchItemIn, AnimeIn, AnimeOut, ErrorResponse
from app.services.anime_service import AnimeService

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

router = APIRouter(prefix="/anime", responses=_ERRORS)

_anime_body = json_body_dep(TypeAdapter(AnimeIn))
_batch_body = json_body_dep(TypeAdapter(list[AnimeBatchItemIn]))


def _request_body(schema: dict[str, Any]) -> dict[str, Any]:
    return {"requestBody": {"required": True, "content": {"application/json": {"schema": schema}}}}


@router.get("", response_model=list[AnimeOut], dependencies=[Depends(require_role(USER))])
async def list_all(service: AnimeService = Depends(anime_service_dep)) -> list[AnimeOut]:
    return [AnimeOut.from_entity(anime) async for anime in service.find_all()]


@router.get("/{anime_id}", response_model=AnimeOut, dependencies=[Depends(require_role(USER))])
async def find_by_id(anime_id: int, service: AnimeService = Depends(anime_service_dep)) -> AnimeOut:
    return AnimeOut.from_entity(await service.find_by_id(anime_id))


@router.post(
    "",
    response_model=AnimeOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role(ADMIN))],
    openapi_extra=_request_body(AnimeIn.model_json_schema()),
)
async def save(
    body: AnimeIn = Depends(_anime_body),
    service: AnimeService = Depends(anime_service_dep),
) -> AnimeOut:
    return AnimeOut.from_entity(await service.save(body.to_entity()))


@router.post(
    "/batch",
    response_model=list[AnimeOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role(ADMIN))],
    openapi_extra=_request_body({"type": "array", "items": AnimeBatchItemIn.model_json_schema()}),
)
async def save_batch(
    body: list[AnimeBatchItemIn] = Depends(_batch_body),
    service: AnimeService = Depends(anime_service_dep),
) -> list[AnimeOut]:
    animes = [item.to_entity() for item in body]
    return [AnimeOut.from_entity(anime) async for anime in service.save_all(animes)]


@router.put(
    "/{anime_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_role(ADMIN))],
    openapi_extra=_request_body(AnimeIn.model_json_schema()),
)
async def update(
    anime_id: int,
    body: AnimeIn = Depends(_anime_body),
    service: AnimeService = Depends(anime_service_dep),
) -> Response:
    await service.update(body.to_entity().with_id(anime_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{anime_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_role(ADMIN))],
)
async def delete(anime_id: int, service: AnimeService = Depends(anime_service_dep)) -> Response:
    await service.delete(anime_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
