"""SQLAlchemy implementation for bondarys_auth persistence.

Provides:
- Base / TimestampMixin: declarative base shared with the identity models
- RefreshTokenModel, PasswordResetTokenModel
- Repository implementations for both
"""

from bondarys_auth.persistence.sqlalchemy.base import Base, TimestampMixin
from bondarys_auth.persistence.sqlalchemy.models import (
    PasswordResetTokenModel,
    RefreshTokenModel,
)
from bondarys_auth.persistence.sqlalchemy.repositories import (
    PasswordResetTokenRepositorySQLAlchemy,
    RefreshTokenRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "PasswordResetTokenModel",
    "PasswordResetTokenRepositorySQLAlchemy",
    "RefreshTokenModel",
    "RefreshTokenRepositorySQLAlchemy",
    "TimestampMixin",
]
