"""Typed account changes.

Each class describes one way the identity store may be updated. The
repository maps every change type to a dedicated column-level update and
rejects types it does not know with ``TypeError``; there is no generic
"update these keys" path.
"""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from bondarys_identity.domain.account.entities.account import Account, OneTimeCode
from bondarys_identity.domain.account.value_objects import (
    AccountRole,
    SsoProvider,
    UserType,
)


@dataclass(frozen=True)
class CreateAccount:
    """Insert a brand-new account (active or placeholder)."""

    account: Account


@dataclass(frozen=True)
class PromoteAccount:
    """Turn an inactive placeholder into an active, verified account in place.

    The profile fields overwrite whatever the placeholder held; the id is
    kept.
    """

    account_id: UUID
    email: str | None
    phone: str | None
    password_hash: str
    first_name: str
    last_name: str
    date_of_birth: date | None
    user_type: UserType
    is_email_verified: bool = True


@dataclass(frozen=True)
class MergeSsoIdentity:
    """Attach provider metadata to an existing account.

    ``first_name``, ``last_name`` and ``avatar_url`` are the values to store,
    already resolved so that manually set fields win over provider data.
    ``activate`` promotes a placeholder found through the provider's email.
    """

    account_id: UUID
    provider: SsoProvider
    provider_id: str
    first_name: str
    last_name: str
    avatar_url: str | None
    activate: bool = False


@dataclass(frozen=True)
class RecordLogin:
    account_id: UUID
    at: datetime


@dataclass(frozen=True)
class IssueLoginOtp:
    """Store a login OTP, replacing any previous one."""

    account_id: UUID
    code: OneTimeCode


@dataclass(frozen=True)
class IssueEmailVerification:
    """Store an email verification code, replacing any previous one."""

    account_id: UUID
    code: OneTimeCode


@dataclass(frozen=True)
class ChangePassword:
    account_id: UUID
    password_hash: str


@dataclass(frozen=True)
class UpdateProfile:
    """Self-service profile edit. ``None`` leaves a field unchanged."""

    account_id: UUID
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    avatar_url: str | None = None


@dataclass(frozen=True)
class ChangeRole:
    account_id: UUID
    role: AccountRole


@dataclass(frozen=True)
class CompleteOnboarding:
    account_id: UUID


AccountChange = (
    CreateAccount
    | PromoteAccount
    | MergeSsoIdentity
    | RecordLogin
    | IssueLoginOtp
    | IssueEmailVerification
    | ChangePassword
    | UpdateProfile
    | ChangeRole
    | CompleteOnboarding
)
