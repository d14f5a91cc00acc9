from bondarys_auth.persistence.sqlalchemy.repositories.password_reset_token_repository import (  # NOQA: E501
    PasswordResetTokenRepositorySQLAlchemy,
)
from bondarys_auth.persistence.sqlalchemy.repositories.refresh_token_repository import (  # NOQA: E501
    RefreshTokenRepositorySQLAlchemy,
)

__all__ = [
    "PasswordResetTokenRepositorySQLAlchemy",
    "RefreshTokenRepositorySQLAlchemy",
]
