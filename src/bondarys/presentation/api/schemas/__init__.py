"""Pydantic schemas for API request/response models."""

from bondarys.presentation.api.schemas.admin import (
    ImpersonateRequest,
    ImpersonationResponse,
)
from bondarys.presentation.api.schemas.auth import (
    AccountResponse,
    AuthResponse,
    ChangePasswordRequest,
    CheckUserResponse,
    EmailRequest,
    GroupMembershipResponse,
    IdentifierRequest,
    LoginRequest,
    LogoutRequest,
    MeResponse,
    OtpLoginRequest,
    ProfileResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SsoLoginRequest,
    SsoProviderInfo,
    SsoProvidersResponse,
    TokenResponse,
    UpdateProfileRequest,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from bondarys.presentation.api.schemas.common import (
    CamelModel,
    ErrorResponse,
    MessageResponse,
)

__all__ = [
    "AccountResponse",
    "AuthResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "CheckUserResponse",
    "EmailRequest",
    "ErrorResponse",
    "GroupMembershipResponse",
    "IdentifierRequest",
    "ImpersonateRequest",
    "ImpersonationResponse",
    "LoginRequest",
    "LogoutRequest",
    "MeResponse",
    "MessageResponse",
    "OtpLoginRequest",
    "ProfileResponse",
    "RefreshRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SsoLoginRequest",
    "SsoProviderInfo",
    "SsoProvidersResponse",
    "TokenResponse",
    "UpdateProfileRequest",
    "VerifyEmailRequest",
    "VerifyEmailResponse",
]
