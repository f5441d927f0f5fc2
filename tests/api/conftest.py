"""Route test fixtures — FastAPI app over an in-memory SQLite database.

Invariants:
    - db_session_dep is overridden, so the lifespan (Postgres, Redis) never runs
    - Accounts ``user`` and ``admin`` exist with password ``devdojo``
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.deps import db_session_dep
from app.main import app


@pytest.fixture
async def client(test_session_factory, seed_users):
    async def override_db_session():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[db_session_dep] = override_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def as_user() -> tuple[str, str]:
    return ("user", "devdojo")


@pytest.fixture
def as_admin() -> tuple[str, str]:
    return ("admin", "devdojo")
