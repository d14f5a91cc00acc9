"""Default group provisioning backed by the local ``groups`` tables."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bondarys_identity.application.ports import GroupMembership, GroupProvisioner
from bondarys_identity.domain.account import Account
from bondarys_identity.infrastructure.persistence.sqlalchemy.models import (
    GroupMemberModel,
    GroupModel,
)

logger = logging.getLogger(__name__)


class GroupProvisionerSQLAlchemy(GroupProvisioner):
    """Creates the owned default group inside a SAVEPOINT.

    A failure rolls back only the savepoint, so the caller can log it and
    still commit the surrounding account change.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def provision_default_group(self, account: Account) -> None:
        name = f"{account.first_name}'s Family" if account.first_name else "My Family"
        async with self._session.begin_nested():
            group = GroupModel(owner_id=account.id, name=name, kind="family")
            self._session.add(group)
            await self._session.flush()
            self._session.add(
                GroupMemberModel(group_id=group.id, account_id=account.id, role="owner"),
            )
            await self._session.flush()
        logger.info("Provisioned default group %s for account %s", group.id, account.id)

    async def memberships(self, account_id: UUID) -> list[GroupMembership]:
        stmt = (
            select(GroupModel.id, GroupModel.name, GroupMemberModel.role)
            .join(GroupMemberModel, GroupMemberModel.group_id == GroupModel.id)
            .where(GroupMemberModel.account_id == account_id)
            .order_by(GroupModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [
            GroupMembership(group_id=group_id, name=name, role=role)
            for group_id, name, role in result.all()
        ]
