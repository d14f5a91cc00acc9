"""SQLAlchemy implementation of RefreshTokenRepository."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bondarys_auth.persistence.sqlalchemy.models import RefreshTokenModel
from bondarys_auth.repositories import RefreshTokenData, RefreshTokenRepository
from bondarys_auth.time import ensure_tz_aware

logger = logging.getLogger(__name__)


class RefreshTokenRepositorySQLAlchemy(RefreshTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(
        self,
        account_id: UUID,
        token_id: str,
        issued_at: datetime,
        expires_at: datetime,
    ) -> None:
        self._session.add(
            RefreshTokenModel(
                token_id=token_id,
                account_id=account_id,
                issued_at=issued_at,
                expires_at=expires_at,
            ),
        )
        await self._session.flush()

    async def consume(self, account_id: UUID, token_id: str) -> bool:
        # Single conditional DELETE: the row count decides the winner when
        # the same token is rotated concurrently.
        stmt = (
            delete(RefreshTokenModel)
            .where(
                RefreshTokenModel.token_id == token_id,
                RefreshTokenModel.account_id == account_id,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def remove(self, account_id: UUID, token_id: str) -> None:
        await self.consume(account_id, token_id)

    async def remove_all_for_account(self, account_id: UUID) -> int:
        stmt = (
            delete(RefreshTokenModel)
            .where(RefreshTokenModel.account_id == account_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        removed = result.rowcount  # type: ignore[attr-defined]
        if removed:
            logger.info("Revoked %d refresh tokens for account %s", removed, account_id)
        return removed

    async def list_for_account(self, account_id: UUID) -> list[RefreshTokenData]:
        stmt = (
            select(RefreshTokenModel)
            .where(RefreshTokenModel.account_id == account_id)
            .order_by(RefreshTokenModel.issued_at, RefreshTokenModel.token_id)
        )
        result = await self._session.execute(stmt)
        return [self._map_to_data(model) for model in result.scalars().all()]

    async def prune(self, account_id: UUID, keep: int, now: datetime) -> int:
        expired = (
            delete(RefreshTokenModel)
            .where(
                RefreshTokenModel.account_id == account_id,
                RefreshTokenModel.expires_at <= now,
            )
            .execution_options(synchronize_session=False)
        )
        removed = (await self._session.execute(expired)).rowcount  # type: ignore[attr-defined]

        newest_first = (
            select(RefreshTokenModel.token_id)
            .where(RefreshTokenModel.account_id == account_id)
            .order_by(
                RefreshTokenModel.issued_at.desc(),
                RefreshTokenModel.token_id.desc(),
            )
            .offset(keep)
        )
        surplus = list((await self._session.execute(newest_first)).scalars().all())
        if surplus:
            stmt = (
                delete(RefreshTokenModel)
                .where(RefreshTokenModel.token_id.in_(surplus))
                .execution_options(synchronize_session=False)
            )
            removed += (await self._session.execute(stmt)).rowcount  # type: ignore[attr-defined]

        if removed:
            logger.debug("Pruned %d refresh tokens for account %s", removed, account_id)
        return removed

    def _map_to_data(self, model: RefreshTokenModel) -> RefreshTokenData:
        return RefreshTokenData(
            token_id=model.token_id,
            account_id=model.account_id,
            issued_at=ensure_tz_aware(model.issued_at),
            expires_at=ensure_tz_aware(model.expires_at),
        )
