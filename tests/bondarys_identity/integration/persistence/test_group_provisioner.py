"""Integration tests for GroupProvisionerSQLAlchemy (SQLite)."""

import pytest
from sqlalchemy import select

from bondarys_identity.domain.account import CreateAccount
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    GroupProvisionerSQLAlchemy,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.models import (
    GroupMemberModel,
    GroupModel,
)
from tests.shared.fixtures.factories import TestAccountFactory


class TestGroupProvisioner:
    @pytest.mark.asyncio
    async def test_creates_owned_group(self, db_session):
        # Arrange
        alice = await AccountRepositorySQLAlchemy(db_session).save(
            CreateAccount(TestAccountFactory.alice()),
        )

        # Act
        await GroupProvisionerSQLAlchemy(db_session).provision_default_group(alice)

        # Assert
        group = (await db_session.execute(select(GroupModel))).scalar_one()
        member = (await db_session.execute(select(GroupMemberModel))).scalar_one()
        assert group.owner_id == alice.id
        assert group.name == "Alice's Family"
        assert member.group_id == group.id
        assert member.account_id == alice.id
        assert member.role == "owner"

    @pytest.mark.asyncio
    async def test_name_without_first_name(self, db_session):
        bob = await AccountRepositorySQLAlchemy(db_session).save(
            CreateAccount(TestAccountFactory.bob_placeholder()),
        )

        await GroupProvisionerSQLAlchemy(db_session).provision_default_group(bob)

        group = (await db_session.execute(select(GroupModel))).scalar_one()
        assert group.name == "My Family"

    @pytest.mark.asyncio
    async def test_memberships(self, db_session):
        # Arrange
        accounts = AccountRepositorySQLAlchemy(db_session)
        alice = await accounts.save(CreateAccount(TestAccountFactory.alice()))
        bob = await accounts.save(CreateAccount(TestAccountFactory.bob_placeholder()))
        groups = GroupProvisionerSQLAlchemy(db_session)
        await groups.provision_default_group(alice)

        # Act
        memberships = await groups.memberships(alice.id)

        # Assert
        assert len(memberships) == 1
        assert memberships[0].name == "Alice's Family"
        assert memberships[0].role == "owner"
        assert await groups.memberships(bob.id) == []
