from __future__ import annotations

from typing import Protocol

from app.domain.entities import Principal


class Authenticator(Protocol):
    async def authenticate(self, username: str, password: str) -> Principal | None:
        ...
