"""Password login, session refresh/logout and password changes."""

import logging
from uuid import UUID

from bondarys_auth import PasswordHashingService, TokenPair
from bondarys_auth.exceptions import AccountNotFoundError, InvalidCredentialsError
from bondarys_auth.time import utc_now
from bondarys_identity.application.services.credential_verifier import (
    CredentialVerifier,
)
from bondarys_identity.application.services.token_service import TokenService
from bondarys_identity.domain.account import (
    Account,
    AccountIdentifier,
    AccountRepository,
    ChangePassword,
    RecordLogin,
)

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Application service for password-based sessions.

    Orchestrates the credential verifier, the identity store and the token
    service. Callers own the transaction and commit after a successful call.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        credential_verifier: CredentialVerifier,
        password_service: PasswordHashingService,
        token_service: TokenService,
    ):
        self._accounts = account_repository
        self._verifier = credential_verifier
        self._password_service = password_service
        self._tokens = token_service

    async def login(self, email: str, password: str) -> tuple[Account, TokenPair]:
        """Authenticate with email and password.

        Raises
        ------
        InvalidCredentialsError
            If the credentials are wrong
        EmailNotVerifiedError
            If the email address has not been verified
        """
        account = await self._verifier.verify(email, password)
        account = await self._accounts.save(RecordLogin(account.id, utc_now()))
        tokens = await self._tokens.issue_pair(account)
        logger.info("Account logged in: %s", account.id)
        return account, tokens

    async def refresh(self, refresh_token: str) -> TokenPair:
        _, tokens = await self._tokens.rotate(refresh_token)
        return tokens

    async def logout(self, account_id: UUID, refresh_token: str) -> None:
        await self._tokens.revoke(account_id, refresh_token)
        logger.info("Account logged out: %s", account_id)

    async def check_user(self, identifier: AccountIdentifier) -> bool:
        """Whether an active account exists; placeholders are invisible."""
        return await self._accounts.exists_active(identifier)

    async def change_password(
        self,
        account_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change the password after re-checking the current one.

        Raises
        ------
        InvalidCredentialsError
            If the current password is wrong
        WeakPasswordError
            If the new password doesn't meet requirements
        """
        account = await self._accounts.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        if not account.password_hash or not self._password_service.verify(
            current_password,
            account.password_hash,
        ):
            raise InvalidCredentialsError("Current password is incorrect")

        new_hash = self._password_service.hash(new_password)
        await self._accounts.save(ChangePassword(account_id, new_hash))
        logger.info("Password changed for account: %s", account_id)
