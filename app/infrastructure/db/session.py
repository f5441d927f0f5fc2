from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings


def build_async_engine(settings: Settings) -> AsyncEngine:
    dsn = settings.postgres_dsn_plain()
    url = make_url(dsn)
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if url.get_backend_name() == "postgresql":
        kwargs.update(
            pool_size=int(settings.db_pool_size),
            max_overflow=int(settings.db_max_overflow),
            pool_timeout=int(settings.db_pool_timeout_seconds),
            connect_args={"command_timeout": int(settings.db_command_timeout_seconds)},
        )
    return create_async_engine(dsn, **kwargs)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)
