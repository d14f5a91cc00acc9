"""Minimal group tables used for default-group provisioning."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bondarys_auth.persistence.sqlalchemy import Base
from bondarys_auth.time import utc_now


class GroupModel(Base):
    __tablename__ = "groups"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    owner_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), default="family", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<GroupModel(id={self.id}, owner_id={self.owner_id}, name={self.name})>"


class GroupMemberModel(Base):
    __tablename__ = "group_members"

    group_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("groups.id"),
        primary_key=True,
    )
    account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), default="member", nullable=False)

    def __repr__(self) -> str:
        return (
            f"<GroupMemberModel(group_id={self.group_id}, "
            f"account_id={self.account_id}, role={self.role})>"
        )
