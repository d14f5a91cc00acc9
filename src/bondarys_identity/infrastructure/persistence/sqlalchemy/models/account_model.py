"""SQLAlchemy model for accounts."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bondarys_auth.persistence.sqlalchemy import Base, TimestampMixin


class AccountModel(Base, TimestampMixin):
    """Persisted account row.

    Transient credentials live in dedicated, typed columns: one hash and one
    expiry per slot.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("sso_provider", "sso_provider_id", name="uq_accounts_sso"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        index=True,
    )
    phone: Mapped[str | None] = mapped_column(
        String(32),
        unique=True,
        nullable=True,
        index=True,
    )
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    user_type: Mapped[str] = mapped_column(String(20), default="family", nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="user", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    sso_provider: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sso_provider_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_onboarding_complete: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    email_verification_code_hash: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    email_verification_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    login_otp_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    login_otp_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AccountModel(id={self.id}, email={self.email}, "
            f"is_active={self.is_active})>"
        )
