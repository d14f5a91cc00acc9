"""Integration tests for PasswordResetTokenRepositorySQLAlchemy (SQLite)."""

from datetime import timedelta

import pytest

from bondarys_auth.persistence.sqlalchemy import PasswordResetTokenRepositorySQLAlchemy
from bondarys_auth.time import utc_now
from tests.shared.fixtures.factories import TestAccountFactory

ALICE = TestAccountFactory.ALICE_ID


@pytest.fixture
def repo(db_session) -> PasswordResetTokenRepositorySQLAlchemy:
    return PasswordResetTokenRepositorySQLAlchemy(db_session)


class TestPasswordResetTokenRepository:
    @pytest.mark.asyncio
    async def test_find_valid_by_hash(self, repo):
        token_id = await repo.create(ALICE, "h" * 64, utc_now() + timedelta(hours=1))

        data = await repo.find_valid_by_hash("h" * 64)

        assert data is not None
        assert data.id == token_id
        assert data.account_id == ALICE
        assert data.used_at is None
        assert data.expires_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_expired_token_is_not_found(self, repo):
        await repo.create(ALICE, "h" * 64, utc_now() - timedelta(seconds=1))

        assert await repo.find_valid_by_hash("h" * 64) is None

    @pytest.mark.asyncio
    async def test_mark_used_once(self, repo):
        token_id = await repo.create(ALICE, "h" * 64, utc_now() + timedelta(hours=1))

        assert await repo.mark_used(token_id) is True
        assert await repo.mark_used(token_id) is False
        assert await repo.find_valid_by_hash("h" * 64) is None

    @pytest.mark.asyncio
    async def test_invalidate_all_for_account(self, repo):
        expires = utc_now() + timedelta(hours=1)
        await repo.create(ALICE, "1" * 64, expires)
        await repo.create(ALICE, "2" * 64, expires)

        await repo.invalidate_all_for_account(ALICE)

        assert await repo.find_valid_by_hash("1" * 64) is None
        assert await repo.find_valid_by_hash("2" * 64) is None

    @pytest.mark.asyncio
    async def test_count_recent_for_account(self, repo):
        expires = utc_now() + timedelta(hours=1)
        await repo.create(ALICE, "1" * 64, expires)
        await repo.create(ALICE, "2" * 64, expires)

        recent = await repo.count_recent_for_account(ALICE, utc_now() - timedelta(hours=1))
        future = await repo.count_recent_for_account(ALICE, utc_now() + timedelta(hours=1))

        assert recent == 2
        assert future == 0
