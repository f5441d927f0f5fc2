from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from typing import Protocol

from app.domain.entities import Anime


class AnimeRepository(Protocol):
    def find_all(self) -> AsyncIterator[Anime]:
        ...

    async def find_by_id(self, anime_id: int) -> Anime | None:
        ...

    async def save(self, anime: Anime) -> Anime:
        ...

    def save_all(self, animes: Iterable[Anime]) -> AsyncIterator[Anime]:
        ...

    async def delete(self, anime: Anime) -> None:
        ...
