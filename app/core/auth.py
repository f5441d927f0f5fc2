from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.core.config import Settings
from app.core.context import username_ctx_var
from app.core.deps import authenticator_dep, settings_dep
from app.core.errors import AccessDeniedError, AuthenticationRequiredError
from app.domain.entities import Principal
from app.domain.ports.authenticator import Authenticator

USER = "USER"
ADMIN = "ADMIN"

_basic = HTTPBasic(auto_error=False)


async def current_principal_dep(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    authenticator: Authenticator = Depends(authenticator_dep),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if credentials is None:
        raise AuthenticationRequiredError(realm=settings.auth_realm)

    principal = await authenticator.authenticate(credentials.username, credentials.password)
    if principal is None:
        raise AuthenticationRequiredError("Invalid Credentials", realm=settings.auth_realm)

    request.state.principal = principal
    username_ctx_var.set(principal.username)
    return principal


def require_role(role: str) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory: authenticate the caller and demand ``role``."""

    async def _require(principal: Principal = Depends(current_principal_dep)) -> Principal:
        if not principal.has_role(role):
            raise AccessDeniedError()
        return principal

    return _require
