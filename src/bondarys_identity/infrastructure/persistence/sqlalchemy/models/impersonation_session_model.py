from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bondarys_auth.persistence.sqlalchemy import Base


class ImpersonationSessionModel(Base):
    """Active impersonation; one row per operator."""

    __tablename__ = "impersonation_sessions"

    operator_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        primary_key=True,
    )
    target_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        nullable=False,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<ImpersonationSessionModel(operator_id={self.operator_id}, "
            f"target_id={self.target_id})>"
        )
