from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.core.security import roles_from_authorities
from app.domain.entities import Principal
from app.domain.ports.authenticator import Authenticator
from app.domain.ports.user_repository import UserRepository
from app.infrastructure.security.passwords import verify_password

logger = logging.getLogger(__name__)

PasswordVerifier = Callable[[str, str], Awaitable[bool]]


class RepositoryAuthenticator(Authenticator):
    def __init__(self, *, users: UserRepository, verifier: PasswordVerifier = verify_password) -> None:
        self._users = users
        self._verify = verifier

    async def authenticate(self, username: str, password: str) -> Principal | None:
        account = await self._users.find_by_username(username)
        if account is None:
            logger.info("auth_unknown_user")
            return None
        if not await self._verify(password, account.password_hash):
            logger.info("auth_bad_credentials")
            return None
        return Principal(
            username=account.username,
            roles=roles_from_authorities(account.authorities),
            name=account.name,
        )
