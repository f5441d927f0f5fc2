from __future__ import annotations

from typing import Protocol

from app.domain.entities import UserAccount


class UserRepository(Protocol):
    async def find_by_username(self, username: str) -> UserAccount | None:
        ...

    async def add(self, account: UserAccount) -> UserAccount:
        ...

    async def list_all(self) -> list[UserAccount]:
        ...
