from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.config import Settings
from app.core.deps import settings_dep


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str


router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz(settings: Settings = Depends(settings_dep)) -> HealthResponse:
    return HealthResponse(service=settings.app_name)
