"""SQLAlchemy implementation of PasswordResetTokenRepository."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bondarys_auth.persistence.sqlalchemy.models import PasswordResetTokenModel
from bondarys_auth.repositories import (
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)
from bondarys_auth.time import ensure_tz_aware, utc_now


class PasswordResetTokenRepositorySQLAlchemy(PasswordResetTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        account_id: UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> UUID:
        token_id = uuid4()
        model = PasswordResetTokenModel(
            id=token_id,
            account_id=account_id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return token_id

    async def find_valid_by_hash(self, token_hash: str) -> PasswordResetTokenData | None:
        now = utc_now()
        stmt = select(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == token_hash,
            PasswordResetTokenModel.used_at.is_(None),
            PasswordResetTokenModel.expires_at > now,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return PasswordResetTokenData(
            id=model.id,
            account_id=model.account_id,
            token_hash=model.token_hash,
            expires_at=ensure_tz_aware(model.expires_at),
            used_at=model.used_at,
            created_at=ensure_tz_aware(model.created_at),
        )

    async def mark_used(self, token_id: UUID) -> bool:
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.id == token_id,
                PasswordResetTokenModel.used_at.is_(None),
            )
            .values(used_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def invalidate_all_for_account(self, account_id: UUID) -> None:
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.account_id == account_id,
                PasswordResetTokenModel.used_at.is_(None),
            )
            .values(used_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def count_recent_for_account(self, account_id: UUID, since: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.account_id == account_id,
                PasswordResetTokenModel.created_at >= since,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()
