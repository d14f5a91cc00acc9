"""Tests for the operator CLI."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typer.testing import CliRunner

from bondarys.presentation.cli.app import app
from bondarys_config import clear_settings_cache
from bondarys_identity.domain.account import CreateAccount
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    create_engine_for,
)
from tests.shared.fixtures.factories import TestAccountFactory

runner = CliRunner()


@pytest.fixture
def database_dsn(tmp_path, monkeypatch) -> str:
    """Point the CLI at an initialized SQLite file."""
    dsn = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_DSN", dsn)
    clear_settings_cache()
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0, result.output
    yield dsn
    clear_settings_cache()


def _insert_alice(dsn: str) -> None:
    async def _insert() -> None:
        engine = create_engine_for(dsn)
        try:
            session_maker = async_sessionmaker(engine, class_=AsyncSession)
            async with session_maker() as session:
                await AccountRepositorySQLAlchemy(session).save(
                    CreateAccount(TestAccountFactory.alice()),
                )
                await session.commit()
        finally:
            await engine.dispose()

    asyncio.run(_insert())


class TestSecretsCommand:
    def test_generate_prints_both_keys(self):
        result = runner.invoke(app, ["secrets", "generate"])

        assert result.exit_code == 0
        assert "JWT_SECRET=" in result.output
        assert "JWT_REFRESH_SECRET=" in result.output


class TestAdminCommands:
    def test_grant_unknown_email(self, database_dsn):
        result = runner.invoke(app, ["admin", "grant", "nobody@example.com"])

        assert result.exit_code == 1
        assert "No account found" in result.output

    def test_grant_and_revoke(self, database_dsn):
        _insert_alice(database_dsn)

        granted = runner.invoke(app, ["admin", "grant", "alice@example.com"])
        revoked = runner.invoke(app, ["admin", "revoke", "alice@example.com"])

        assert granted.exit_code == 0, granted.output
        assert "is now an admin" in granted.output
        assert revoked.exit_code == 0, revoked.output
        assert "no longer an admin" in revoked.output
