"""Account entity.

An ``Account`` is an immutable snapshot of one row of the identity store.
State transitions never mutate it in place; they are expressed as typed
changes (see ``bondarys_identity.domain.account.changes``) which the
repository applies with explicit column-level updates and then re-reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from bondarys_auth.time import utc_now
from bondarys_identity.domain.account.value_objects import (
    AccountRole,
    Email,
    PhoneNumber,
    SsoProvider,
    UserType,
)


@dataclass(frozen=True)
class OneTimeCode:
    """Hash of a short-lived numeric code and the moment it stops being valid."""

    code_hash: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class TransientCredentials:
    """Short-lived credentials held on an account.

    The two slots are independent: issuing a login OTP never touches a
    pending email verification code and vice versa. Each slot is cleared
    after a single successful use.
    """

    email_verification: OneTimeCode | None = None
    login_otp: OneTimeCode | None = None


@dataclass(frozen=True)
class Account:
    """A user account as stored in the identity store.

    Attributes
    ----------
    id
        Opaque identifier, never changes (also not on promotion)
    email, phone
        Lookup keys; at least one is present
    password_hash
        bcrypt hash, absent for pure SSO/OTP accounts
    is_active
        False for placeholders created by an OTP request for an unknown
        identifier
    transient
        Pending login OTP and email verification codes
    """

    id: UUID
    email: str | None = None
    phone: str | None = None
    password_hash: str | None = None
    first_name: str = ""
    last_name: str = ""
    avatar_url: str | None = None
    date_of_birth: date | None = None
    user_type: UserType = UserType.FAMILY
    role: AccountRole = AccountRole.USER
    is_active: bool = True
    is_email_verified: bool = False
    sso_provider: SsoProvider | None = None
    sso_provider_id: str | None = None
    transient: TransientCredentials = field(default_factory=TransientCredentials)
    is_onboarding_complete: bool = False
    last_login_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.email and not self.phone:
            msg = "An account needs an email address or a phone number"
            raise ValueError(msg)

    @classmethod
    def create(  # NOQA: PLR0913
        cls,
        email: Email | None = None,
        phone: PhoneNumber | None = None,
        *,
        password_hash: str | None = None,
        first_name: str = "",
        last_name: str = "",
        date_of_birth: date | None = None,
        user_type: UserType = UserType.FAMILY,
        avatar_url: str | None = None,
        is_email_verified: bool = False,
        sso_provider: SsoProvider | None = None,
        sso_provider_id: str | None = None,
    ) -> Account:
        """Create a new active account with a fresh identifier."""
        now = utc_now()
        return cls(
            id=uuid4(),
            email=email.value if email else None,
            phone=phone.value if phone else None,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            avatar_url=avatar_url,
            date_of_birth=date_of_birth,
            user_type=user_type,
            is_active=True,
            is_email_verified=is_email_verified,
            sso_provider=sso_provider,
            sso_provider_id=sso_provider_id,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def create_placeholder(
        cls,
        email: Email | None = None,
        phone: PhoneNumber | None = None,
    ) -> Account:
        """Create an inactive placeholder for an identifier nobody registered yet."""
        now = utc_now()
        return cls(
            id=uuid4(),
            email=email.value if email else None,
            phone=phone.value if phone else None,
            is_active=False,
            is_email_verified=False,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_placeholder(self) -> bool:
        return not self.is_active

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.email or self.phone or ""

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id}, email={self.email!r}, phone={self.phone!r}, "
            f"is_active={self.is_active}, role={self.role.value})"
        )
