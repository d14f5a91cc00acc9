"""One-time codes for passwordless login and email verification."""

import logging
from dataclasses import dataclass

from bondarys_auth import OneTimeCodeService, TokenPair
from bondarys_auth.exceptions import InvalidOtpError, OtpExpiredError
from bondarys_auth.time import utc_now
from bondarys_identity.application.ports import Notifier
from bondarys_identity.application.services.token_service import TokenService
from bondarys_identity.domain.account import (
    Account,
    AccountIdentifier,
    AccountRepository,
    CreateAccount,
    Email,
    IssueEmailVerification,
    IssueLoginOtp,
    OneTimeCode,
)

logger = logging.getLogger(__name__)

OTP_REQUESTED_MESSAGE = "If the account exists, a verification code has been sent."
VERIFICATION_SENT_MESSAGE = (
    "If the email needs verification, a verification code has been sent."
)
ALREADY_VERIFIED_MESSAGE = "Email is already verified."
EMAIL_VERIFIED_MESSAGE = "Email verified successfully."


@dataclass(frozen=True)
class EmailVerificationResult:
    """Outcome of ``verify_email``; tokens are only issued on a fresh verification."""

    message: str
    account: Account | None = None
    tokens: TokenPair | None = None


class OtpService:
    """Issues and redeems six-digit codes.

    Login OTPs and email verification codes use separate storage slots
    with the same ten-minute validity. Redeeming a code is a single
    conditional update, so a code can succeed at most once even under
    concurrent requests.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        code_service: OneTimeCodeService,
        token_service: TokenService,
        notifier: Notifier,
        app_name: str = "Bondarys",
    ):
        self._accounts = account_repository
        self._codes = code_service
        self._tokens = token_service
        self._notifier = notifier
        self._app_name = app_name

    # -------------------------------------------------------------------------
    # Login OTP
    # -------------------------------------------------------------------------

    async def request_login_otp(self, identifier: AccountIdentifier) -> str:
        """Issue a login code for ``identifier``.

        Unknown identifiers get an inactive placeholder account. The response
        message never reveals whether the account existed before.
        """
        account = await self._accounts.find_by_identifier(identifier)
        if account is None:
            placeholder = Account.create_placeholder(
                email=identifier.email,
                phone=identifier.phone,
            )
            account = await self._accounts.save(CreateAccount(placeholder))
            logger.info("Created placeholder account %s for OTP login", account.id)

        code = self._codes.generate()
        now = utc_now()
        await self._accounts.save(
            IssueLoginOtp(
                account.id,
                OneTimeCode(self._codes.hash(code), self._codes.expiry(now)),
            ),
        )

        if account.email:
            await self._notify("login-otp", account.email, {"code": code})
        else:
            # No SMS gateway yet: phone-only codes are delivered out of band
            logger.info("Login OTP for phone %s: %s", account.phone, code)

        return OTP_REQUESTED_MESSAGE

    async def verify_login_otp(
        self,
        identifier: AccountIdentifier,
        code: str,
    ) -> tuple[Account, TokenPair]:
        """Redeem a login code and issue tokens.

        Placeholder accounts stay inactive and only receive an access token.

        Raises
        ------
        InvalidOtpError
            If there is no stored code, it does not match, or it was used
        OtpExpiredError
            If the matching code is past its expiry
        """
        account = await self._accounts.find_by_identifier(identifier)
        if account is None:
            logger.info("OTP login for unknown identifier %s", identifier)
            raise InvalidOtpError(details={"reason": "unknown_identifier"})

        self._check_code(account.transient.login_otp, code, account)

        if not await self._accounts.consume_login_otp(
            account.id,
            self._codes.hash(code),
            utc_now(),
        ):
            logger.warning("Login OTP for account %s was redeemed concurrently", account.id)
            raise InvalidOtpError(details={"reason": "already_used"})

        account = await self._reload(account)
        tokens = await self._tokens.issue_pair(account)
        logger.info("Account logged in with OTP: %s", account.id)
        return account, tokens

    # -------------------------------------------------------------------------
    # Email verification
    # -------------------------------------------------------------------------

    async def request_email_verification(self, email: str | Email) -> str:
        """(Re)send an email verification code.

        Unknown and already verified addresses get the same response
        without any email being sent.
        """
        account = await self._accounts.find_by_email(email)
        if account is None or account.is_email_verified:
            logger.info("Verification code not sent for %s (unknown or verified)", email)
            return VERIFICATION_SENT_MESSAGE

        await self.send_email_verification(account)
        return VERIFICATION_SENT_MESSAGE

    async def send_email_verification(self, account: Account) -> None:
        """Store a fresh verification code for ``account`` and email it."""
        if not account.email:
            return
        code = self._codes.generate()
        await self._accounts.save(
            IssueEmailVerification(
                account.id,
                OneTimeCode(self._codes.hash(code), self._codes.expiry(utc_now())),
            ),
        )
        await self._notify(
            "email-verification",
            account.email,
            {
                "first_name": account.first_name,
                "code": code,
                "app_name": self._app_name,
            },
        )

    async def verify_email(self, email: str | Email, code: str) -> EmailVerificationResult:
        """Redeem a verification code, mark the email verified and log in.

        Raises
        ------
        InvalidOtpError
            If the email is unknown or the code is missing, wrong or used
        OtpExpiredError
            If the matching code is past its expiry
        """
        account = await self._accounts.find_by_email(email)
        if account is None:
            raise InvalidOtpError(details={"reason": "unknown_email"})

        if account.is_email_verified:
            return EmailVerificationResult(message=ALREADY_VERIFIED_MESSAGE)

        self._check_code(account.transient.email_verification, code, account)

        if not await self._accounts.consume_email_verification(
            account.id,
            self._codes.hash(code),
            utc_now(),
        ):
            raise InvalidOtpError(details={"reason": "already_used"})

        account = await self._reload(account)
        tokens = await self._tokens.issue_pair(account)
        logger.info("Email verified for account: %s", account.id)
        return EmailVerificationResult(
            message=EMAIL_VERIFIED_MESSAGE,
            account=account,
            tokens=tokens,
        )

    # -------------------------------------------------------------------------

    def _check_code(self, stored: OneTimeCode | None, code: str, account: Account) -> None:
        if not self._codes.is_well_formed(code):
            raise InvalidOtpError(details={"reason": "malformed", "account_id": str(account.id)})
        if stored is None:
            raise InvalidOtpError(details={"reason": "no_code", "account_id": str(account.id)})
        if not self._codes.matches(code, stored.code_hash):
            raise InvalidOtpError(details={"reason": "mismatch", "account_id": str(account.id)})
        if stored.is_expired(utc_now()):
            raise OtpExpiredError(details={"account_id": str(account.id)})

    async def _reload(self, account: Account) -> Account:
        reloaded = await self._accounts.find_by_id(account.id)
        return reloaded if reloaded is not None else account

    async def _notify(self, template: str, to: str, data: dict) -> None:
        try:
            await self._notifier.send(template, to, data)
        except Exception as e:
            # Delivery is fire-and-forget; the code is already stored
            logger.error("Failed to send %s to %s: %s", template, to, e)
