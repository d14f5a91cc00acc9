import hashlib
import logging
import secrets
from datetime import timedelta

from bondarys_auth import PasswordHashingService
from bondarys_auth.exceptions import InvalidResetTokenError
from bondarys_auth.repositories import PasswordResetTokenRepository
from bondarys_auth.time import utc_now
from bondarys_identity.application.ports import Notifier
from bondarys_identity.application.services.token_service import TokenService
from bondarys_identity.domain.account import AccountRepository, ChangePassword

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for handling password reset requests and token validation."""

    MAX_RESETS_PER_DAY = 3
    DEFAULT_EXPIRY_MINUTES = 60

    def __init__(  # noqa: PLR0913
        self,
        account_repository: AccountRepository,
        token_repository: PasswordResetTokenRepository,
        password_service: PasswordHashingService,
        token_service: TokenService,
        notifier: Notifier,
        frontend_base_url: str,
        expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
    ):
        self._accounts = account_repository
        self._reset_tokens = token_repository
        self._password_service = password_service
        self._tokens = token_service
        self._notifier = notifier
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._expiry = timedelta(minutes=expiry_minutes)

    def _hash_token(self, raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode()).hexdigest()

    async def request_reset(self, email: str) -> None:
        account = await self._accounts.find_by_email(email)
        if account is None or not account.is_active:
            # Silent fail to prevent email enumeration
            logger.debug("Password reset requested for unknown email: %s", email)
            return

        since = utc_now() - timedelta(days=1)
        count = await self._reset_tokens.count_recent_for_account(account.id, since)
        if count >= self.MAX_RESETS_PER_DAY:
            logger.warning("Rate limit exceeded for password reset: %s", email)
            return

        raw_token = secrets.token_urlsafe(32)
        expires_at = utc_now() + self._expiry

        await self._reset_tokens.invalidate_all_for_account(account.id)
        await self._reset_tokens.create(account.id, self._hash_token(raw_token), expires_at)

        reset_link = f"{self._frontend_base_url}/reset-password?token={raw_token}"
        try:
            await self._notifier.send(
                "password-reset",
                account.email or email,
                {"reset_link": reset_link},
            )
            logger.info("Password reset email sent to %s", email)
        except Exception as e:
            # The token exists either way; the user can ask again
            logger.error("Failed to send password reset email: %s", e)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password with a reset token and end all sessions.

        Raises
        ------
        InvalidResetTokenError
            If the token is unknown, expired or already used
        WeakPasswordError
            If the new password doesn't meet requirements
        """
        reset_token = await self._reset_tokens.find_valid_by_hash(self._hash_token(token))
        if reset_token is None:
            raise InvalidResetTokenError

        if reset_token.is_expired(utc_now()) or reset_token.is_used():
            raise InvalidResetTokenError

        new_hash = self._password_service.hash(new_password)

        if not await self._reset_tokens.mark_used(reset_token.id):
            raise InvalidResetTokenError

        await self._accounts.save(ChangePassword(reset_token.account_id, new_hash))
        revoked = await self._tokens.revoke_all(reset_token.account_id)
        logger.info(
            "Password reset completed for account %s (%d sessions ended)",
            reset_token.account_id,
            revoked,
        )
