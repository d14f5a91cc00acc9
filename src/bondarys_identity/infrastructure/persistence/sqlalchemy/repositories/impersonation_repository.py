"""SQLAlchemy implementation of ImpersonationRepository."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bondarys_identity.domain.account import ImpersonationRepository
from bondarys_identity.infrastructure.persistence.sqlalchemy.models import (
    ImpersonationSessionModel,
)

logger = logging.getLogger(__name__)


class ImpersonationRepositorySQLAlchemy(ImpersonationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_target(self, operator_id: UUID) -> UUID | None:
        stmt = select(ImpersonationSessionModel.target_id).where(
            ImpersonationSessionModel.operator_id == operator_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def start(self, operator_id: UUID, target_id: UUID, started_at: datetime) -> None:
        await self._delete(operator_id)
        self._session.add(
            ImpersonationSessionModel(
                operator_id=operator_id,
                target_id=target_id,
                started_at=started_at,
            ),
        )
        await self._session.flush()

    async def stop(self, operator_id: UUID) -> UUID | None:
        previous = await self.get_target(operator_id)
        await self._delete(operator_id)
        return previous

    async def _delete(self, operator_id: UUID) -> None:
        stmt = (
            delete(ImpersonationSessionModel)
            .where(ImpersonationSessionModel.operator_id == operator_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
