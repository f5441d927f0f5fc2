"""Root conftest — environment, database and blocking-guard fixtures.

Invariants:
    - App settings are read from the environment set here, before any
      ``app`` module is imported
    - Every test that asks for ``db_session`` gets a fresh in-memory SQLite
      database with the full schema
    - ``blockbuster`` turns any blocking call made on the event loop into
      ``BlockingError``
"""

from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("POSTGRES_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncGenerator, Iterator

import bcrypt
import pytest
from blockbuster import BlockBuster, blockbuster_ctx
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.domain.entities import Anime
from app.infrastructure.db.models import AnimeRow, Base, UserRow

TEST_PASSWORD = "devdojo"


@pytest.fixture
def blockbuster() -> Iterator[BlockBuster]:
    with blockbuster_ctx() as bb:
        yield bb


@pytest.fixture
def valid_anime() -> Anime:
    return Anime(id=1, name="Tensei Shitara Slime Datta Ken")


@pytest.fixture
def anime_to_be_saved() -> Anime:
    return Anime(name="Tensei Shitara Slime Datta Ken")


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(test_session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_users(test_session_factory: async_sessionmaker[AsyncSession]) -> None:
    """``user`` has ROLE_USER; ``admin`` has ROLE_ADMIN and ROLE_USER."""
    hashed = bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()
    async with test_session_factory() as session:
        session.add_all(
            [
                UserRow(name="Regular", username="user", password=hashed, authorities="ROLE_USER"),
                UserRow(name="Admin", username="admin", password=hashed, authorities="ROLE_ADMIN,ROLE_USER"),
            ]
        )
        await session.commit()


@pytest.fixture
async def seed_anime(test_session_factory: async_sessionmaker[AsyncSession]) -> Anime:
    async with test_session_factory() as session:
        row = AnimeRow(name="Tensei Shitara Slime Datta Ken")
        session.add(row)
        await session.commit()
        return Anime(id=row.id, name=row.name)
