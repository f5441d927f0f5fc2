"""Account administration for the anime API (``anime-admin``)."""

from __future__ import annotations

import asyncio

import typer

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.domain.entities import UserAccount
from app.infrastructure.db.session import build_async_engine, build_sessionmaker
from app.infrastructure.security.passwords import hash_password
from app.repositories.user_repository_sqlalchemy import SqlAlchemyUserRepository

app = typer.Typer(no_args_is_help=True, help="Manage accounts allowed to call the anime API.")

_KNOWN_ROLES = ("USER", "ADMIN")


def _authorities(roles: list[str]) -> tuple[str, ...]:
    out: list[str] = []
    for role in roles:
        value = role.strip().upper().removeprefix("ROLE_")
        if value not in _KNOWN_ROLES:
            raise typer.BadParameter(f"unknown role {role!r}; expected one of {', '.join(_KNOWN_ROLES)}")
        authority = f"ROLE_{value}"
        if authority not in out:
            out.append(authority)
    return tuple(out)


async def _create_user(account: UserAccount) -> UserAccount | None:
    settings = get_settings()
    engine = build_async_engine(settings)
    try:
        async with build_sessionmaker(engine)() as session:
            repo = SqlAlchemyUserRepository(session=session, timeout_seconds=settings.repository_timeout_seconds)
            if await repo.find_by_username(account.username) is not None:
                return None
            return await repo.add(account)
    finally:
        await engine.dispose()


async def _list_users() -> list[UserAccount]:
    settings = get_settings()
    engine = build_async_engine(settings)
    try:
        async with build_sessionmaker(engine)() as session:
            repo = SqlAlchemyUserRepository(session=session, timeout_seconds=settings.repository_timeout_seconds)
            return await repo.list_all()
    finally:
        await engine.dispose()


@app.command("create-user")
def create_user(
    username: str = typer.Argument(..., help="Login name."),
    name: str = typer.Option("", "--name", help="Display name."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, confirmation_prompt=True),
    role: list[str] = typer.Option(["USER"], "--role", "-r", help="Role to grant; repeat for several."),
) -> None:
    """Store a new account with a bcrypt-hashed password."""

    settings = get_settings()
    setup_logging(settings)

    if not username.strip():
        raise typer.BadParameter("username must not be blank")
    if not password:
        raise typer.BadParameter("password must not be empty")

    account = UserAccount(
        username=username.strip(),
        name=name,
        password_hash=hash_password(password, rounds=settings.bcrypt_rounds),
        authorities=_authorities(role),
    )
    created = asyncio.run(_create_user(account))
    if created is None:
        typer.echo(f"user {account.username!r} already exists", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"created {created.username} ({','.join(created.authorities)})")


@app.command("list-users")
def list_users() -> None:
    """Print every account and its authorities."""

    for account in asyncio.run(_list_users()):
        typer.echo(f"{account.username}\t{account.name}\t{','.join(account.authorities)}")


if __name__ == "__main__":
    app()
