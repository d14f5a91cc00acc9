"""Registration and placeholder promotion."""

import logging
from dataclasses import dataclass
from datetime import date

from bondarys_auth import PasswordHashingService, TokenPair
from bondarys_auth.exceptions import AlreadyRegisteredError
from bondarys_identity.application.ports import GroupProvisioner
from bondarys_identity.application.services.otp_service import OtpService
from bondarys_identity.application.services.token_service import TokenService
from bondarys_identity.domain.account import (
    Account,
    AccountRepository,
    CreateAccount,
    Email,
    PhoneNumber,
    PromoteAccount,
    UserType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationProfile:
    email: str
    password: str | None = None
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    date_of_birth: date | None = None
    user_type: UserType = UserType.FAMILY


class RegistrationService:
    """Creates accounts or claims placeholders left behind by OTP requests.

    A placeholder is promoted in place so its id (and everything that
    references it) stays valid. When the email and the phone each belong to
    a different placeholder, the email placeholder wins and the phone-only
    one is deleted. Every active account ends up with some
    password hash; accounts registered without a password get an unusable
    one.
    """

    def __init__(  # NOQA: PLR0913
        self,
        account_repository: AccountRepository,
        password_service: PasswordHashingService,
        token_service: TokenService,
        group_provisioner: GroupProvisioner,
        otp_service: OtpService,
        require_email_verification: bool = False,
    ):
        self._accounts = account_repository
        self._password_service = password_service
        self._tokens = token_service
        self._groups = group_provisioner
        self._otp = otp_service
        self._require_email_verification = require_email_verification

    async def register(self, profile: RegistrationProfile) -> tuple[Account, TokenPair]:
        """Register a new account.

        Raises
        ------
        InvalidEmailError / InvalidPhoneNumberError
            If the identifiers are malformed
        WeakPasswordError
            If a password is supplied but too weak
        AlreadyRegisteredError
            If the email or phone belongs to an active account
        """
        email = Email(profile.email)
        phone = PhoneNumber(profile.phone) if profile.phone else None

        # Validate before touching the store
        password_hash = (
            self._password_service.hash(profile.password)
            if profile.password
            else self._password_service.hash_unusable_password()
        )

        by_email = await self._accounts.find_by_email(email)
        if by_email is not None and by_email.is_active:
            raise AlreadyRegisteredError(email.value)

        by_phone = await self._accounts.find_by_phone(phone) if phone else None
        if by_phone is not None and by_phone.is_active:
            raise AlreadyRegisteredError(phone.value)  # type: ignore[union-attr]

        if by_email is not None and by_phone is not None and by_email.id != by_phone.id:
            # Two placeholders: the email one is promoted and takes over the phone
            await self._accounts.delete_placeholder(by_phone.id)
            by_phone = None

        placeholder = by_email or by_phone
        if placeholder is not None:
            account = await self._accounts.save(
                PromoteAccount(
                    account_id=placeholder.id,
                    email=email.value,
                    phone=phone.value if phone else placeholder.phone,
                    password_hash=password_hash,
                    first_name=profile.first_name,
                    last_name=profile.last_name,
                    date_of_birth=profile.date_of_birth,
                    user_type=profile.user_type,
                    is_email_verified=not self._require_email_verification,
                ),
            )
            logger.info("Placeholder account promoted: %s", account.id)
        else:
            account = await self._accounts.save(
                CreateAccount(
                    Account.create(
                        email,
                        phone,
                        password_hash=password_hash,
                        first_name=profile.first_name,
                        last_name=profile.last_name,
                        date_of_birth=profile.date_of_birth,
                        user_type=profile.user_type,
                        is_email_verified=not self._require_email_verification,
                    ),
                ),
            )
            logger.info("Account registered: %s", account.id)

        try:
            await self._groups.provision_default_group(account)
        except Exception as e:
            logger.error("Failed to provision default group for %s: %s", account.id, e)

        if not account.is_email_verified:
            await self._otp.send_email_verification(account)

        tokens = await self._tokens.issue_pair(account)
        return account, tokens
