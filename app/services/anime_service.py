from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import aclosing

from app.core.errors import AnimeNotFoundError, AnimeValidationError
from app.domain.entities import Anime
from app.domain.ports.anime_repository import AnimeRepository
from app.domain.rules import has_valid_name

logger = logging.getLogger(__name__)


class AnimeService:
    """CRUD orchestration over an :class:`AnimeRepository`.

    Mutations by id look the record up first so a missing id always surfaces
    as :class:`AnimeNotFoundError` instead of a silent no-op in storage.
    """

    def __init__(self, *, repository: AnimeRepository) -> None:
        self._repo = repository

    async def find_all(self) -> AsyncIterator[Anime]:
        async with aclosing(self._repo.find_all()) as stream:
            async for anime in stream:
                yield anime

    async def find_by_id(self, anime_id: int) -> Anime:
        anime = await self._repo.find_by_id(anime_id)
        if anime is None:
            raise AnimeNotFoundError()
        return anime

    async def save(self, anime: Anime) -> Anime:
        self._ensure_valid_name(anime)
        saved = await self._repo.save(anime)
        logger.info("anime_saved", extra={"anime_id": saved.id})
        return saved

    async def save_all(self, animes: Iterable[Anime]) -> AsyncIterator[Anime]:
        """Persist ``animes`` and stream back the stored records.

        Each stored record is checked after the write. The first one with an
        invalid name ends the stream with :class:`AnimeValidationError`;
        records yielded before it stay persisted.
        """
        count = 0
        async with aclosing(self._repo.save_all(list(animes))) as stream:
            async for saved in stream:
                if not has_valid_name(saved):
                    logger.info("anime_batch_rejected", extra={"anime_id": saved.id, "accepted": count})
                    raise AnimeValidationError()
                count += 1
                yield saved
        logger.info("anime_batch_saved", extra={"count": count})

    async def update(self, anime: Anime) -> None:
        if anime.id is None:
            raise AnimeNotFoundError()
        found = await self.find_by_id(anime.id)
        await self._repo.save(anime.with_id(found.id))
        logger.info("anime_updated", extra={"anime_id": found.id})

    async def delete(self, anime_id: int) -> None:
        found = await self.find_by_id(anime_id)
        await self._repo.delete(found)
        logger.info("anime_deleted", extra={"anime_id": found.id})

    @staticmethod
    def _ensure_valid_name(anime: Anime) -> None:
        if not has_valid_name(anime):
            raise AnimeValidationError()
