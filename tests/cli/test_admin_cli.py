from __future__ import annotations

import asyncio

import bcrypt
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from typer.testing import CliRunner

import app.cli as cli
from app.core.config import get_settings
from app.infrastructure.db.models import Base

runner = CliRunner()


async def _create_schema(dsn: str) -> None:
    engine = create_async_engine(dsn)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def cli_database(tmp_path, monkeypatch):
    dsn = f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}"
    monkeypatch.setenv("POSTGRES_DSN", dsn)
    monkeypatch.setattr(cli, "setup_logging", lambda settings: None)
    get_settings.cache_clear()
    asyncio.run(_create_schema(dsn))
    yield dsn
    get_settings.cache_clear()


def test_create_user_stores_hashed_password_and_roles(cli_database):
    result = runner.invoke(
        cli.app,
        ["create-user", "admin", "--name", "Admin", "--password", "devdojo", "--role", "admin", "--role", "USER"],
    )

    assert result.exit_code == 0, result.output
    assert "ROLE_ADMIN,ROLE_USER" in result.output

    accounts = asyncio.run(cli._list_users())
    assert [a.username for a in accounts] == ["admin"]
    assert accounts[0].authorities == ("ROLE_ADMIN", "ROLE_USER")
    assert bcrypt.checkpw(b"devdojo", accounts[0].password_hash.encode())


def test_create_user_twice_fails(cli_database):
    args = ["create-user", "user", "--password", "devdojo"]
    assert runner.invoke(cli.app, args).exit_code == 0

    result = runner.invoke(cli.app, args)

    assert result.exit_code == 1


def test_create_user_rejects_unknown_role(cli_database):
    result = runner.invoke(cli.app, ["create-user", "user", "--password", "devdojo", "--role", "ROOT"])

    assert result.exit_code != 0


def test_list_users_prints_accounts(cli_database):
    runner.invoke(cli.app, ["create-user", "user", "--name", "Regular", "--password", "devdojo"])

    result = runner.invoke(cli.app, ["list-users"])

    assert result.exit_code == 0
    assert "user\tRegular\tROLE_USER" in result.output
