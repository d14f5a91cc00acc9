"""Bondarys Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the account domain. It handles:
- Password hashing (bcrypt)
- JWT access/refresh token creation and verification
- Six-digit one-time codes
- The refresh-token whitelist and password reset tokens

Architecture:
    bondarys_auth/
    ├── services/           # Pure logic (password hashing, JWT, one-time codes)
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   └── sqlalchemy/     # SQLAlchemy implementation
    ├── schemas.py          # Data classes
    └── exceptions.py       # Error codes and auth exceptions
"""

from bondarys_auth.exceptions import (
    AccountNotFoundError,
    AdminRequiredError,
    AlreadyRegisteredError,
    AuthenticationFailedError,
    AuthError,
    EmailNotVerifiedError,
    ErrorCode,
    ImpersonationNotAllowedError,
    InvalidCredentialsError,
    InvalidOtpError,
    InvalidProviderTokenError,
    InvalidRefreshTokenError,
    InvalidResetTokenError,
    InvalidTokenError,
    OtpExpiredError,
    RefreshTokenExpiredError,
    RefreshTokenRevokedError,
    UnknownAccountError,
    UnsupportedProviderError,
    ValidationFailedError,
    WeakPasswordError,
)
from bondarys_auth.repositories import RefreshTokenRepository
from bondarys_auth.schemas import TokenPair, TokenPayload
from bondarys_auth.services import (
    JWTService,
    OneTimeCodeService,
    PasswordHashingService,
)

__all__ = [
    # Services
    "JWTService",
    "OneTimeCodeService",
    "PasswordHashingService",
    # Repositories (interfaces)
    "RefreshTokenRepository",
    # Schemas
    "TokenPair",
    "TokenPayload",
    # Exceptions
    "AccountNotFoundError",
    "AdminRequiredError",
    "AlreadyRegisteredError",
    "AuthError",
    "AuthenticationFailedError",
    "EmailNotVerifiedError",
    "ErrorCode",
    "ImpersonationNotAllowedError",
    "InvalidCredentialsError",
    "InvalidOtpError",
    "InvalidProviderTokenError",
    "InvalidRefreshTokenError",
    "InvalidResetTokenError",
    "InvalidTokenError",
    "OtpExpiredError",
    "RefreshTokenExpiredError",
    "RefreshTokenRevokedError",
    "UnknownAccountError",
    "UnsupportedProviderError",
    "ValidationFailedError",
    "WeakPasswordError",
]
