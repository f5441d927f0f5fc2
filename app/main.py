from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from app.api.v1.router import router as v1_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware.access_log import AccessLogMiddleware
from app.core.middleware.rate_limit import RateLimitMiddleware
from app.core.middleware.request_id import RequestIdMiddleware
from app.core.middleware.security_headers import SecurityHeadersMiddleware
from app.infrastructure.db.session import build_async_engine, build_sessionmaker
from app.infrastructure.redis.client import close_redis_client, create_redis_client

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings)

    docs_url = "/docs" if settings.docs_enabled else None
    redoc_url = "/redoc" if settings.docs_enabled else None
    openapi_url = "/openapi.json" if settings.docs_enabled else None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        await _startup(app, settings)
        try:
            yield
        finally:
            await _shutdown(app)

    app = FastAPI(
        title=settings.app_name,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        allow_credentials=settings.cors_allow_credentials,
    )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


async def _startup(app: FastAPI, settings: Settings) -> None:
    engine: AsyncEngine = build_async_engine(settings)
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)

    redis = await create_redis_client(settings)
    app.state.redis = redis

    logger.info("startup_complete", extra={"redis_enabled": redis is not None, "rate_limit_enabled": settings.rate_limit_enabled})


async def _shutdown(app: FastAPI) -> None:
    await close_redis_client(getattr(app.state, "redis", None))

    engine: AsyncEngine | None = getattr(app.state, "engine", None)
    if engine is not None:
        try:
            await engine.dispose()
        except Exception as exc:  # noqa: BLE001
            logger.warning("engine_dispose_failed", extra={"reason": str(exc)})

    logger.info("shutdown_complete")


app = create_app()
