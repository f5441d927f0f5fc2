from __future__ import annotations

import pytest

from app.domain.entities import Anime
from app.repositories.anime_repository_sqlalchemy import SqlAlchemyAnimeRepository


@pytest.fixture
def repo(db_session) -> SqlAlchemyAnimeRepository:
    return SqlAlchemyAnimeRepository(session=db_session, timeout_seconds=5)


async def test_save_assigns_id(repo):
    saved = await repo.save(Anime(name="Hellsing"))

    assert saved.id is not None
    assert saved.name == "Hellsing"
    assert await repo.find_by_id(saved.id) == saved


async def test_find_by_id_returns_none_for_missing_id(repo):
    assert await repo.find_by_id(999) is None


async def test_find_all_is_ordered_by_id(repo):
    first = await repo.save(Anime(name="Berserk"))
    second = await repo.save(Anime(name="Monster"))

    assert [a async for a in repo.find_all()] == [first, second]


async def test_save_with_id_replaces_record(repo):
    saved = await repo.save(Anime(name="Hellsing"))

    await repo.save(saved.with_name("Hellsing Ultimate"))

    assert await repo.find_by_id(saved.id) == Anime(id=saved.id, name="Hellsing Ultimate")
    assert len([a async for a in repo.find_all()]) == 1


async def test_delete_removes_record(repo):
    saved = await repo.save(Anime(name="Hellsing"))

    await repo.delete(saved)

    assert await repo.find_by_id(saved.id) is None


async def test_save_all_commits_each_record_as_it_streams(repo, test_session_factory):
    stream = repo.save_all([Anime(name="Akira"), Anime(name="Paprika")])

    first = await anext(stream)
    async with test_session_factory() as other:
        peer = SqlAlchemyAnimeRepository(session=other, timeout_seconds=5)
        assert await peer.find_by_id(first.id) == first

    rest = [a async for a in stream]
    assert [a.name for a in rest] == ["Paprika"]
