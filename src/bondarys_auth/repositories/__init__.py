"""Abstract repository interfaces for auth persistence."""

from bondarys_auth.repositories.password_reset_token_repository import (
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)
from bondarys_auth.repositories.refresh_token_repository import (
    RefreshTokenData,
    RefreshTokenRepository,
)

__all__ = [
    "PasswordResetTokenData",
    "PasswordResetTokenRepository",
    "RefreshTokenData",
    "RefreshTokenRepository",
]
