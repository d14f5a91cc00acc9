"""Authentication exceptions and error codes.

These exceptions are raised by the auth and identity packages and are
mapped to HTTP responses by the presentation layer. Every exception carries
a stable ``ErrorCode`` that clients may rely on, a human-readable message
and optional ``details`` that are logged but never sent to the client.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Authentication (401)
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_OTP = "INVALID_OTP"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    REFRESH_TOKEN_EXPIRED = "REFRESH_TOKEN_EXPIRED"
    REFRESH_TOKEN_REVOKED = "REFRESH_TOKEN_REVOKED"
    UNKNOWN_ACCOUNT = "UNKNOWN_ACCOUNT"
    INVALID_PROVIDER_TOKEN = "INVALID_PROVIDER_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Forbidden (403)
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"

    # Validation (400)
    OTP_EXPIRED = "OTP_EXPIRED"
    UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"
    IMPERSONATION_NOT_ALLOWED = "IMPERSONATION_NOT_ALLOWED"

    # Not found (404)
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"

    # Conflict (409)
    ALREADY_REGISTERED = "ALREADY_REGISTERED"

    # Server (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthError(Exception):
    """Base exception for all authentication and identity errors.

    Attributes
    ----------
    message
        Human-readable error message
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged but not exposed to users)
    """

    default_message = "Authentication error"
    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class AuthenticationFailedError(AuthError):
    """Base for failures surfaced to clients as 401 with a generic message."""

    default_message = "Authentication failed"


class InvalidCredentialsError(AuthenticationFailedError):
    """Raised when email or password is incorrect during login."""

    default_message = "Invalid email or password"
    default_code = ErrorCode.INVALID_CREDENTIALS


class InvalidOtpError(AuthenticationFailedError):
    """Raised when a one-time code is missing, wrong or already used."""

    default_message = "Invalid verification code"
    default_code = ErrorCode.INVALID_OTP


class InvalidRefreshTokenError(AuthenticationFailedError):
    """Raised when a refresh token is malformed or has a bad signature."""

    default_message = "Invalid refresh token"
    default_code = ErrorCode.INVALID_REFRESH_TOKEN


class RefreshTokenExpiredError(AuthenticationFailedError):
    """Raised when a refresh token is past its expiry."""

    default_message = "Refresh token has expired"
    default_code = ErrorCode.REFRESH_TOKEN_EXPIRED


class RefreshTokenRevokedError(AuthenticationFailedError):
    """Raised when a refresh token is no longer in the account's whitelist.

    This is the signal for token reuse or a session ended by logout.
    """

    default_message = "Refresh token has been revoked"
    default_code = ErrorCode.REFRESH_TOKEN_REVOKED


class UnknownAccountError(AuthenticationFailedError):
    """Raised when a token refers to an account that no longer exists."""

    default_message = "Unknown account"
    default_code = ErrorCode.UNKNOWN_ACCOUNT


class InvalidProviderTokenError(AuthenticationFailedError):
    """Raised when an SSO provider rejects or cannot validate a token."""

    default_message = "Invalid provider token"
    default_code = ErrorCode.INVALID_PROVIDER_TOKEN


class InvalidTokenError(AuthenticationFailedError):
    """Raised when an access token is invalid, expired, or malformed."""

    default_message = "Invalid or expired token"
    default_code = ErrorCode.INVALID_TOKEN


class EmailNotVerifiedError(AuthError):
    """Raised when the password is correct but the email is unverified."""

    default_message = "Please verify your email before logging in"
    default_code = ErrorCode.EMAIL_NOT_VERIFIED


class AdminRequiredError(AuthError):
    """Raised when a non-admin attempts an admin operation."""

    default_message = "Admin access required"
    default_code = ErrorCode.ADMIN_REQUIRED


class OtpExpiredError(AuthError):
    """Raised when a matching one-time code is past its expiry."""

    default_message = "Verification code has expired"
    default_code = ErrorCode.OTP_EXPIRED


class UnsupportedProviderError(AuthError):
    """Raised for unknown or unconfigured SSO providers."""

    default_code = ErrorCode.UNSUPPORTED_PROVIDER

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            f"Unsupported SSO provider: {provider}",
            details={"provider": provider},
        )


class ValidationFailedError(AuthError):
    """Raised when input is malformed."""

    default_message = "Validation failed"
    default_code = ErrorCode.VALIDATION_FAILED


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    default_message = "Password does not meet requirements"
    default_code = ErrorCode.WEAK_PASSWORD


class InvalidResetTokenError(AuthError):
    """Raised when a password reset token is invalid, expired or used."""

    default_message = "Invalid or expired reset token"
    default_code = ErrorCode.INVALID_RESET_TOKEN


class ImpersonationNotAllowedError(AuthError):
    """Raised when an impersonation target is not acceptable."""

    default_message = "Cannot impersonate this account"
    default_code = ErrorCode.IMPERSONATION_NOT_ALLOWED


class AccountNotFoundError(AuthError):
    """Raised when an account addressed by id does not exist."""

    default_code = ErrorCode.ACCOUNT_NOT_FOUND

    def __init__(self, account_id: Any):
        self.account_id = account_id
        super().__init__(
            f"Account not found: {account_id}",
            details={"account_id": str(account_id)},
        )


class AlreadyRegisteredError(AuthError):
    """Raised when an active account already exists for an identifier."""

    default_code = ErrorCode.ALREADY_REGISTERED

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            "An account with this email or phone already exists",
            details={"identifier": identifier},
        )
