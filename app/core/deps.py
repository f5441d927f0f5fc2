from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings, get_settings
from app.domain.ports.anime_repository import AnimeRepository
from app.domain.ports.authenticator import Authenticator
from app.domain.ports.user_repository import UserRepository
from app.repositories.anime_repository_sqlalchemy import SqlAlchemyAnimeRepository
from app.repositories.user_repository_sqlalchemy import SqlAlchemyUserRepository
from app.services.anime_service import AnimeService
from app.services.authentication_service import RepositoryAuthenticator

T = TypeVar("T")


def settings_dep() -> Settings:
    return get_settings()


def _sessionmaker(request: Request) -> async_sessionmaker[AsyncSession]:
    sm: async_sessionmaker[AsyncSession] | None = getattr(request.app.state, "sessionmaker", None)
    if sm is None:
        raise RuntimeError("DB sessionmaker is not initialized")
    return sm


async def db_session_dep(request: Request) -> AsyncGenerator[AsyncSession, None]:
    sm = _sessionmaker(request)
    async with sm() as session:
        yield session


def anime_repository_dep(
    session: AsyncSession = Depends(db_session_dep),
    settings: Settings = Depends(settings_dep),
) -> AnimeRepository:
    return SqlAlchemyAnimeRepository(session=session, timeout_seconds=settings.repository_timeout_seconds)


def user_repository_dep(
    session: AsyncSession = Depends(db_session_dep),
    settings: Settings = Depends(settings_dep),
) -> UserRepository:
    return SqlAlchemyUserRepository(session=session, timeout_seconds=settings.repository_timeout_seconds)


def authenticator_dep(users: UserRepository = Depends(user_repository_dep)) -> Authenticator:
    return RepositoryAuthenticator(users=users)


def anime_service_dep(repo: AnimeRepository = Depends(anime_repository_dep)) -> AnimeService:
    return AnimeService(repository=repo)


def json_body_dep(adapter: TypeAdapter[T]) -> Callable[[Request], Awaitable[T]]:
    """Validate the JSON body after the route-level ``dependencies`` (role checks) resolve."""

    async def _read(request: Request) -> T:
        try:
            return adapter.validate_json(await request.body())
        except ValidationError as exc:
            raise RequestValidationError(
                [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
            ) from exc

    return _read
