from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import Anime
from app.domain.ports.anime_repository import AnimeRepository
from app.infrastructure.db.models import AnimeRow


def _to_entity(row: AnimeRow) -> Anime:
    return Anime(id=row.id, name=row.name)


class SqlAlchemyAnimeRepository(AnimeRepository):
    def __init__(self, *, session: AsyncSession, timeout_seconds: float) -> None:
        self._session = session
        self._timeout_seconds = float(timeout_seconds)

    async def find_all(self) -> AsyncIterator[Anime]:
        stmt = select(AnimeRow).order_by(AnimeRow.id)
        result = await asyncio.wait_for(self._session.execute(stmt), timeout=self._timeout_seconds)
        for row in result.scalars().all():
            yield _to_entity(row)

    async def find_by_id(self, anime_id: int) -> Anime | None:
        row = await asyncio.wait_for(self._session.get(AnimeRow, anime_id), timeout=self._timeout_seconds)
        if row is None:
            return None
        return _to_entity(row)

    async def save(self, anime: Anime) -> Anime:
        if anime.id is None:
            row = AnimeRow(name=anime.name)
            self._session.add(row)
        else:
            row = await asyncio.wait_for(
                self._session.merge(AnimeRow(id=anime.id, name=anime.name)),
                timeout=self._timeout_seconds,
            )
        # One commit per record.
        await asyncio.wait_for(self._session.commit(), timeout=self._timeout_seconds)
        return _to_entity(row)

    async def save_all(self, animes: Iterable[Anime]) -> AsyncIterator[Anime]:
        for anime in animes:
            yield await self.save(anime)

    async def delete(self, anime: Anime) -> None:
        row = await asyncio.wait_for(self._session.get(AnimeRow, anime.id), timeout=self._timeout_seconds)
        if row is None:
            return
        await self._session.delete(row)
        await asyncio.wait_for(self._session.commit(), timeout=self._timeout_seconds)
