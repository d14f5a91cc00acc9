"""Authentication schemas for request/response models.

All bodies use camelCase names on the wire.
"""

from datetime import date, datetime
from typing import Self
from uuid import UUID

from pydantic import ConfigDict, EmailStr, Field, model_validator

from bondarys.presentation.api.schemas.common import CamelModel
from bondarys_auth import TokenPair
from bondarys_identity.application.ports import GroupMembership
from bondarys_identity.domain.account import Account, SsoProvider, UserType

# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    """Request schema for registration.

    Without a password the account can only sign in via OTP or SSO.
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str | None = Field(
        default=None,
        max_length=128,
        description="Password (8 characters to 72 bytes)",
    )
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    date_of_birth: date | None = None
    user_type: UserType = UserType.FAMILY

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "alice@example.com",
                "password": "Secret123!",
                "firstName": "Alice",
                "lastName": "Doe",
                "userType": "family",
            },
        },
    )


class LoginRequest(CamelModel):
    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "alice@example.com", "password": "Secret123!"},
        },
    )


class SsoLoginRequest(CamelModel):
    provider: str = Field(..., description="google, facebook or apple")
    provider_token: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"provider": "google", "providerToken": "eyJhbGciOiJSUzI1NiIs..."},
        },
    )


class IdentifierRequest(CamelModel):
    """Email or phone number; the email is used when both are given."""

    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)

    @model_validator(mode="after")
    def _require_identifier(self) -> Self:
        if not self.email and not self.phone:
            msg = "Either email or phone is required"
            raise ValueError(msg)
        return self


class OtpLoginRequest(IdentifierRequest):
    otp: str = Field(..., min_length=1, max_length=12)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "bob@example.com", "otp": "042137"},
        },
    )


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class VerifyEmailRequest(CamelModel):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12)


class EmailRequest(CamelModel):
    """Request schema for resend-verification and forgot-password."""

    email: EmailStr


class ResetPasswordRequest(CamelModel):
    """Request schema for resetting a password with a token."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., max_length=128)


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(..., max_length=128)


class UpdateProfileRequest(CamelModel):
    """Only the supplied fields change."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    date_of_birth: date | None = None
    avatar_url: str | None = Field(default=None, max_length=500)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class AccountResponse(CamelModel):
    """Sanitized account: no password hash, codes or refresh tokens."""

    id: UUID
    email: str | None
    phone: str | None
    first_name: str
    last_name: str
    avatar_url: str | None
    date_of_birth: date | None
    user_type: str
    role: str
    is_active: bool
    is_email_verified: bool
    is_onboarding_complete: bool
    sso_provider: str | None
    last_login_at: datetime | None
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> Self:
        return cls(
            id=account.id,
            email=account.email,
            phone=account.phone,
            first_name=account.first_name,
            last_name=account.last_name,
            avatar_url=account.avatar_url,
            date_of_birth=account.date_of_birth,
            user_type=account.user_type.value,
            role=account.role.value,
            is_active=account.is_active,
            is_email_verified=account.is_email_verified,
            is_onboarding_complete=account.is_onboarding_complete,
            sso_provider=account.sso_provider.value if account.sso_provider else None,
            last_login_at=account.last_login_at,
            created_at=account.created_at,
        )


class TokenResponse(CamelModel):
    """Response schema for token data.

    ``refreshToken`` is null for inactive placeholder accounts.
    """

    access_token: str
    refresh_token: str | None = None
    token_type: str = Field(default="bearer")
    expires_in: int

    @classmethod
    def from_pair(cls, tokens: TokenPair) -> Self:
        return cls(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "refreshToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "tokenType": "bearer",
                "expiresIn": 900,
            },
        },
    )


class AuthResponse(TokenResponse):
    """Response schema for every successful sign-in path."""

    account: AccountResponse

    @classmethod
    def create(cls, account: Account, tokens: TokenPair) -> Self:
        return cls(
            account=AccountResponse.from_account(account),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
        )


class CheckUserResponse(CamelModel):
    exists: bool


class VerifyEmailResponse(CamelModel):
    """Tokens are only present when this call verified the email."""

    message: str
    account: AccountResponse | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None


class MeResponse(AccountResponse):
    """The effective account, plus the operator while impersonating."""

    impersonated_by: UUID | None = None


class GroupMembershipResponse(CamelModel):
    group_id: UUID
    name: str
    role: str

    @classmethod
    def from_membership(cls, membership: GroupMembership) -> Self:
        return cls(
            group_id=membership.group_id,
            name=membership.name,
            role=membership.role,
        )


class ProfileResponse(AccountResponse):
    """The effective account together with the groups it belongs to."""

    groups: list[GroupMembershipResponse] = Field(default_factory=list)


class SsoProviderInfo(CamelModel):
    id: str
    display_name: str

    @classmethod
    def from_provider(cls, provider: SsoProvider) -> Self:
        return cls(id=provider.value, display_name=provider.value.capitalize())


class SsoProvidersResponse(CamelModel):
    providers: list[SsoProviderInfo]
