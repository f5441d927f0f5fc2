from __future__ import annotations

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import parse_authorities
from app.domain.entities import UserAccount
from app.domain.ports.user_repository import UserRepository
from app.infrastructure.db.models import UserRow


def _to_entity(row: UserRow) -> UserAccount:
    return UserAccount(
        id=row.id,
        name=row.name,
        username=row.username,
        password_hash=row.password,
        authorities=parse_authorities(row.authorities),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, *, session: AsyncSession, timeout_seconds: float) -> None:
        self._session = session
        self._timeout_seconds = float(timeout_seconds)

    async def find_by_username(self, username: str) -> UserAccount | None:
        value = (username or "").strip()
        if not value:
            return None

        stmt = select(UserRow).where(UserRow.username == value).limit(1)
        result = await asyncio.wait_for(self._session.execute(stmt), timeout=self._timeout_seconds)
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _to_entity(row)

    async def add(self, account: UserAccount) -> UserAccount:
        row = UserRow(
            name=account.name,
            username=account.username,
            password=account.password_hash,
            authorities=",".join(account.authorities),
        )
        self._session.add(row)
        await asyncio.wait_for(self._session.commit(), timeout=self._timeout_seconds)
        return _to_entity(row)

    async def list_all(self) -> list[UserAccount]:
        stmt = select(UserRow).order_by(UserRow.username)
        result = await asyncio.wait_for(self._session.execute(stmt), timeout=self._timeout_seconds)
        return [_to_entity(row) for row in result.scalars().all()]
