"""AnimeService — orchestration over a mocked repository.

Invariants:
    - Missing ids surface as AnimeNotFoundError for find/update/delete
    - save_all streams valid records and stops at the first blank name
    - No pipeline performs a blocking call on the event loop (blockbuster)
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from blockbuster import BlockingError

from app.core.errors import AnimeNotFoundError, AnimeValidationError
from app.domain.entities import Anime
from app.services.anime_service import AnimeService

pytestmark = pytest.mark.usefixtures("blockbuster")


async def _stream(items: list[Anime]) -> AsyncIterator[Anime]:
    for item in items:
        yield item


async def _collect(stream: AsyncIterator[Anime]) -> list[Anime]:
    return [item async for item in stream]


@pytest.fixture
def repository(valid_anime: Anime, anime_to_be_saved: Anime) -> AsyncMock:
    repo = AsyncMock()
    repo.find_all = MagicMock(side_effect=lambda: _stream([valid_anime]))
    repo.find_by_id.return_value = valid_anime
    repo.save.return_value = valid_anime
    repo.save_all = MagicMock(side_effect=lambda animes: _stream([valid_anime for _ in animes]))
    repo.delete.return_value = None
    return repo


@pytest.fixture
def service(repository: AsyncMock) -> AnimeService:
    return AnimeService(repository=repository)


async def test_blocking_call_on_event_loop_is_detected():
    with pytest.raises(BlockingError):
        time.sleep(0)


async def test_find_all_returns_every_anime(service, valid_anime):
    assert await _collect(service.find_all()) == [valid_anime]


async def test_find_all_with_empty_store_is_not_an_error(service, repository):
    repository.find_all = MagicMock(side_effect=lambda: _stream([]))
    assert await _collect(service.find_all()) == []


async def test_find_by_id_returns_anime_when_it_exists(service, valid_anime):
    assert await service.find_by_id(1) == valid_anime


async def test_find_by_id_raises_not_found_when_repository_returns_nothing(service, repository):
    repository.find_by_id.return_value = None
    with pytest.raises(AnimeNotFoundError):
        await service.find_by_id(1)


async def test_save_creates_anime(service, repository, anime_to_be_saved, valid_anime):
    assert await service.save(anime_to_be_saved) == valid_anime
    repository.save.assert_awaited_once_with(anime_to_be_saved)


@pytest.mark.parametrize("name", ["", "   ", "\t"])
async def test_save_rejects_blank_name_without_touching_storage(service, repository, name):
    with pytest.raises(AnimeValidationError):
        await service.save(Anime(name=name))
    repository.save.assert_not_awaited()


async def test_save_all_streams_saved_anime(service, anime_to_be_saved, valid_anime):
    saved = await _collect(service.save_all([anime_to_be_saved, anime_to_be_saved]))
    assert saved == [valid_anime, valid_anime]


async def test_save_all_yields_valid_items_before_failing_on_blank_name(service, repository, anime_to_be_saved, valid_anime):
    repository.save_all = MagicMock(side_effect=lambda animes: _stream([valid_anime, valid_anime.with_name("")]))

    received: list[Anime] = []
    with pytest.raises(AnimeValidationError):
        async for anime in service.save_all([anime_to_be_saved, anime_to_be_saved.with_name("")]):
            received.append(anime)

    assert received == [valid_anime]
    # Validation happens on persisted results: the whole batch reached storage.
    (batch,), _ = repository.save_all.call_args
    assert len(batch) == 2


async def test_save_all_stops_consuming_repository_after_failure(service, repository, valid_anime):
    consumed: list[Anime] = []

    async def _tracking_stream(animes):
        for anime in [valid_anime.with_name(""), valid_anime, valid_anime]:
            consumed.append(anime)
            yield anime

    repository.save_all = MagicMock(side_effect=_tracking_stream)

    with pytest.raises(AnimeValidationError):
        await _collect(service.save_all([valid_anime, valid_anime, valid_anime]))

    assert len(consumed) == 1


async def test_update_replaces_existing_anime(service, repository, valid_anime):
    changed = valid_anime.with_name("Overlord")
    assert await service.update(changed) is None
    repository.save.assert_awaited_once_with(changed)


async def test_update_raises_not_found_when_anime_does_not_exist(service, repository, valid_anime):
    repository.find_by_id.return_value = None
    with pytest.raises(AnimeNotFoundError):
        await service.update(valid_anime)
    repository.save.assert_not_awaited()


async def test_delete_removes_existing_anime(service, repository, valid_anime):
    assert await service.delete(1) is None
    repository.delete.assert_awaited_once_with(valid_anime)


async def test_delete_raises_not_found_when_anime_does_not_exist(service, repository):
    repository.find_by_id.return_value = None
    with pytest.raises(AnimeNotFoundError):
        await service.delete(1)
    repository.delete.assert_not_awaited()


async def test_repeated_delete_fails_with_not_found(service, repository, valid_anime):
    repository.find_by_id.side_effect = [valid_anime, None]

    await service.delete(1)
    with pytest.raises(AnimeNotFoundError):
        await service.delete(1)
