import logging

from bondarys_auth import PasswordHashingService
from bondarys_auth.exceptions import EmailNotVerifiedError, InvalidCredentialsError
from bondarys_identity.domain.account import Account, AccountRepository, Email

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """Checks an email/password combination without side effects.

    Unknown email, missing password hash, wrong password and inactive
    placeholder all fail with the same ``InvalidCredentialsError``; which
    check failed is only logged.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        password_service: PasswordHashingService,
    ):
        self._accounts = account_repository
        self._password_service = password_service

    async def verify(self, email: str | Email, password: str) -> Account:
        """Return the account the credentials belong to.

        Raises
        ------
        InvalidCredentialsError
            If the credentials do not identify an account
        EmailNotVerifiedError
            If the password is correct but the email is not verified yet
        """
        account = await self._accounts.find_by_email(email)
        if account is None:
            logger.info("Login failed: unknown email %s", email)
            raise InvalidCredentialsError(details={"reason": "unknown_email"})

        if not account.password_hash:
            logger.info("Login failed: account %s has no password", account.id)
            raise InvalidCredentialsError(details={"reason": "no_password"})

        if not self._password_service.verify(password, account.password_hash):
            logger.info("Login failed: wrong password for account %s", account.id)
            raise InvalidCredentialsError(details={"reason": "password_mismatch"})

        if not account.is_active:
            logger.info("Login failed: account %s is a placeholder", account.id)
            raise InvalidCredentialsError(details={"reason": "inactive"})

        if not account.is_email_verified:
            raise EmailNotVerifiedError(details={"account_id": str(account.id)})

        return account
