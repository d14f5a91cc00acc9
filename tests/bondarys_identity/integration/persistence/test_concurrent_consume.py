"""Concurrency tests for single-use credentials on file-backed SQLite.

Each consumer runs in its own session (own connection) and commits. SQLite
admits one writer at a time; the loser waits on the lock and then matches
no row.
"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bondarys_auth.persistence.sqlalchemy import RefreshTokenRepositorySQLAlchemy
from bondarys_auth.time import utc_now
from bondarys_identity.domain.account import CreateAccount, IssueLoginOtp, OneTimeCode
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
)
from tests.shared.fixtures.factories import TestAccountFactory

CODE_HASH = "e" * 64


@pytest.fixture
def session_maker(sqlite_engine):
    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


class TestConcurrentConsume:
    @pytest.mark.asyncio
    async def test_login_otp_has_one_winner(self, session_maker):
        # Arrange
        bob = TestAccountFactory.bob_placeholder()
        now = utc_now()
        async with session_maker() as setup:
            accounts = AccountRepositorySQLAlchemy(setup)
            await accounts.save(CreateAccount(bob))
            await accounts.save(
                IssueLoginOtp(
                    account_id=bob.id,
                    code=OneTimeCode(CODE_HASH, now + timedelta(minutes=10)),
                ),
            )
            await setup.commit()

        async def consume() -> bool:
            async with session_maker() as session:
                won = await AccountRepositorySQLAlchemy(session).consume_login_otp(
                    bob.id, CODE_HASH, now
                )
                await session.commit()
                return won

        # Act
        results = await asyncio.gather(consume(), consume(), consume())

        # Assert
        assert sorted(results) == [False, False, True]
        async with session_maker() as check:
            reloaded = await AccountRepositorySQLAlchemy(check).find_by_id(bob.id)
        assert reloaded.transient.login_otp is None

    @pytest.mark.asyncio
    async def test_refresh_token_has_one_winner(self, session_maker):
        # Arrange
        alice = TestAccountFactory.ALICE_ID
        now = utc_now()
        async with session_maker() as setup:
            await RefreshTokenRepositorySQLAlchemy(setup).add(
                alice, "jti-shared", now, now + timedelta(days=7)
            )
            await setup.commit()

        async def consume() -> bool:
            async with session_maker() as session:
                won = await RefreshTokenRepositorySQLAlchemy(session).consume(
                    alice, "jti-shared"
                )
                await session.commit()
                return won

        # Act
        results = await asyncio.gather(consume(), consume())

        # Assert
        assert sorted(results) == [False, True]
