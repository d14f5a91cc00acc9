"""Account repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from bondarys_identity.domain.account.changes import AccountChange
from bondarys_identity.domain.account.entities import Account
from bondarys_identity.domain.account.value_objects import (
    AccountIdentifier,
    Email,
    PhoneNumber,
    SsoProvider,
)


class AccountRepository(ABC):
    """Repository interface for accounts (the identity store)."""

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> Account | None:
        """Find an account by its ID."""

    @abstractmethod
    async def find_by_email(self, email: str | Email) -> Account | None:
        """Find an account by email address (active or placeholder)."""

    @abstractmethod
    async def find_by_phone(self, phone: str | PhoneNumber) -> Account | None:
        """Find an account by phone number (active or placeholder)."""

    @abstractmethod
    async def find_by_sso(
        self,
        provider: SsoProvider,
        provider_id: str,
    ) -> Account | None:
        """Find the account linked to an external identity."""

    async def find_by_identifier(self, identifier: AccountIdentifier) -> Account | None:
        if identifier.email is not None:
            return await self.find_by_email(identifier.email)
        return await self.find_by_phone(identifier.phone)  # type: ignore[arg-type]

    @abstractmethod
    async def exists_active(self, identifier: AccountIdentifier) -> bool:
        """Check for an active account; placeholders never count."""

    @abstractmethod
    async def save(self, change: AccountChange) -> Account:
        """Apply one typed change and return the updated account.

        Raises
        ------
        TypeError
            If the change type is not supported
        AccountNotFoundError
            If the change targets an account that does not exist
        AlreadyRegisteredError
            If the change would duplicate an email, phone or SSO identity
        """

    @abstractmethod
    async def consume_login_otp(
        self,
        account_id: UUID,
        code_hash: str,
        now: datetime,
    ) -> bool:
        """Atomically clear a matching, unexpired login OTP and record the login.

        Returns whether the code was consumed by this call.
        """

    @abstractmethod
    async def consume_email_verification(
        self,
        account_id: UUID,
        code_hash: str,
        now: datetime,
    ) -> bool:
        """Atomically clear a matching, unexpired verification code and mark
        the email verified.

        Returns whether the code was consumed by this call.
        """

    @abstractmethod
    async def delete_placeholder(self, account_id: UUID) -> bool:
        """Delete an inactive placeholder together with anything pointing at it.

        Active accounts are never deleted. Returns whether a row was removed.
        """
