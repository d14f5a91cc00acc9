"""Concurrency tests for the refresh-token whitelist on PostgreSQL.

Two sessions consume the same token id; the row lock taken by the first
DELETE makes the second wait, and it matches no row once the first
commits.
"""

import asyncio
from datetime import timedelta

import pytest

from bondarys_auth.persistence.sqlalchemy import RefreshTokenRepositorySQLAlchemy
from bondarys_auth.time import utc_now
from tests.shared.fixtures.factories import TestAccountFactory

ALICE = TestAccountFactory.ALICE_ID


@pytest.mark.integration
class TestConcurrentRotation:
    @pytest.mark.asyncio
    async def test_only_one_consumer_wins(self, pg_session_maker):
        # Arrange
        async with pg_session_maker() as setup:
            now = utc_now()
            await RefreshTokenRepositorySQLAlchemy(setup).add(
                ALICE, "jti-shared", now, now + timedelta(days=7)
            )
            await setup.commit()

        # Act
        async with pg_session_maker() as first, pg_session_maker() as second:
            first_won = await RefreshTokenRepositorySQLAlchemy(first).consume(
                ALICE, "jti-shared"
            )
            second_attempt = asyncio.create_task(
                RefreshTokenRepositorySQLAlchemy(second).consume(ALICE, "jti-shared"),
            )
            await asyncio.sleep(0.2)
            await first.commit()
            second_won = await second_attempt
            await second.commit()

        # Assert
        assert first_won is True
        assert second_won is False
