"""SQLAlchemy implementation of AccountRepository."""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bondarys_auth.exceptions import AccountNotFoundError, AlreadyRegisteredError
from bondarys_auth.time import ensure_tz_aware
from bondarys_identity.domain.account import (
    Account,
    AccountChange,
    AccountIdentifier,
    AccountRepository,
    AccountRole,
    ChangePassword,
    ChangeRole,
    CompleteOnboarding,
    CreateAccount,
    Email,
    IssueEmailVerification,
    IssueLoginOtp,
    MergeSsoIdentity,
    OneTimeCode,
    PhoneNumber,
    PromoteAccount,
    RecordLogin,
    SsoProvider,
    TransientCredentials,
    UpdateProfile,
    UserType,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
    ImpersonationSessionModel,
)

logger = logging.getLogger(__name__)


class AccountRepositorySQLAlchemy(AccountRepository):
    """SQLAlchemy implementation of the AccountRepository interface.

    Every change type maps to exactly one handler issuing an explicit
    UPDATE (or INSERT for ``CreateAccount``). Reads always refresh the
    identity map so that callers see the effect of those statements.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._handlers: dict[type, Callable[[Any], Awaitable[UUID]]] = {
            CreateAccount: self._create,
            PromoteAccount: self._promote,
            MergeSsoIdentity: self._merge_sso,
            RecordLogin: self._record_login,
            IssueLoginOtp: self._issue_login_otp,
            IssueEmailVerification: self._issue_email_verification,
            ChangePassword: self._change_password,
            UpdateProfile: self._update_profile,
            ChangeRole: self._change_role,
            CompleteOnboarding: self._complete_onboarding,
        }

    async def find_by_id(self, account_id: UUID) -> Account | None:
        return await self._find_one(AccountModel.id == account_id)

    async def find_by_email(self, email: str | Email) -> Account | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value
        return await self._find_one(AccountModel.email == email_value)

    async def find_by_phone(self, phone: str | PhoneNumber) -> Account | None:
        phone_value = (
            phone.value if isinstance(phone, PhoneNumber) else PhoneNumber(phone).value
        )
        return await self._find_one(AccountModel.phone == phone_value)

    async def find_by_sso(
        self,
        provider: SsoProvider,
        provider_id: str,
    ) -> Account | None:
        return await self._find_one(
            AccountModel.sso_provider == provider.value,
            AccountModel.sso_provider_id == provider_id,
        )

    async def exists_active(self, identifier: AccountIdentifier) -> bool:
        column = AccountModel.email if identifier.is_email else AccountModel.phone
        stmt = (
            select(func.count())
            .select_from(AccountModel)
            .where(column == identifier.value, AccountModel.is_active.is_(True))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def save(self, change: AccountChange) -> Account:
        handler = self._handlers.get(type(change))
        if handler is None:
            msg = f"Unsupported account change: {type(change).__name__}"
            raise TypeError(msg)

        try:
            account_id = await handler(change)
            await self._session.flush()
        except IntegrityError as e:
            logger.warning("Account change %s violates uniqueness: %s", change, e)
            raise AlreadyRegisteredError(_identifier_of(change)) from e

        account = await self.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def consume_login_otp(
        self,
        account_id: UUID,
        code_hash: str,
        now: datetime,
    ) -> bool:
        stmt = (
            update(AccountModel)
            .where(
                AccountModel.id == account_id,
                AccountModel.login_otp_hash == code_hash,
                AccountModel.login_otp_expires_at >= now,
            )
            .values(
                login_otp_hash=None,
                login_otp_expires_at=None,
                last_login_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def consume_email_verification(
        self,
        account_id: UUID,
        code_hash: str,
        now: datetime,
    ) -> bool:
        stmt = (
            update(AccountModel)
            .where(
                AccountModel.id == account_id,
                AccountModel.email_verification_code_hash == code_hash,
                AccountModel.email_verification_expires_at >= now,
            )
            .values(
                email_verification_code_hash=None,
                email_verification_expires_at=None,
                is_email_verified=True,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def delete_placeholder(self, account_id: UUID) -> bool:
        placeholder_ids = select(AccountModel.id).where(
            AccountModel.id == account_id,
            AccountModel.is_active.is_(False),
        )
        await self._session.execute(
            delete(ImpersonationSessionModel)
            .where(ImpersonationSessionModel.target_id.in_(placeholder_ids))
            .execution_options(synchronize_session=False),
        )
        result = await self._session.execute(
            delete(AccountModel)
            .where(AccountModel.id == account_id, AccountModel.is_active.is_(False))
            .execution_options(synchronize_session=False),
        )
        deleted = result.rowcount == 1  # type: ignore[attr-defined]
        if deleted:
            logger.info("Deleted placeholder account: %s", account_id)
        return deleted

    # -------------------------------------------------------------------------
    # Change handlers
    # -------------------------------------------------------------------------

    async def _create(self, change: CreateAccount) -> UUID:
        account = change.account
        self._session.add(self._map_to_model(account))
        logger.info(
            "Created account: %s (email: %s, active: %s)",
            account.id,
            account.email,
            account.is_active,
        )
        return account.id

    async def _promote(self, change: PromoteAccount) -> UUID:
        logger.info("Promoting placeholder account: %s", change.account_id)
        return await self._update(
            change.account_id,
            email=change.email,
            phone=change.phone,
            password_hash=change.password_hash,
            first_name=change.first_name,
            last_name=change.last_name,
            date_of_birth=change.date_of_birth,
            user_type=change.user_type.value,
            is_active=True,
            is_email_verified=change.is_email_verified,
        )

    async def _merge_sso(self, change: MergeSsoIdentity) -> UUID:
        values: dict[str, Any] = {
            "sso_provider": change.provider.value,
            "sso_provider_id": change.provider_id,
            "first_name": change.first_name,
            "last_name": change.last_name,
            "avatar_url": change.avatar_url,
        }
        if change.activate:
            values.update(is_active=True, is_email_verified=True)
        return await self._update(change.account_id, **values)

    async def _record_login(self, change: RecordLogin) -> UUID:
        return await self._update(change.account_id, last_login_at=change.at)

    async def _issue_login_otp(self, change: IssueLoginOtp) -> UUID:
        return await self._update(
            change.account_id,
            login_otp_hash=change.code.code_hash,
            login_otp_expires_at=change.code.expires_at,
        )

    async def _issue_email_verification(self, change: IssueEmailVerification) -> UUID:
        return await self._update(
            change.account_id,
            email_verification_code_hash=change.code.code_hash,
            email_verification_expires_at=change.code.expires_at,
        )

    async def _change_password(self, change: ChangePassword) -> UUID:
        return await self._update(change.account_id, password_hash=change.password_hash)

    async def _update_profile(self, change: UpdateProfile) -> UUID:
        values = {
            "first_name": change.first_name,
            "last_name": change.last_name,
            "phone": change.phone,
            "date_of_birth": change.date_of_birth,
            "avatar_url": change.avatar_url,
        }
        return await self._update(
            change.account_id,
            **{key: value for key, value in values.items() if value is not None},
        )

    async def _change_role(self, change: ChangeRole) -> UUID:
        logger.info("Changing role of %s to %s", change.account_id, change.role.value)
        return await self._update(change.account_id, role=change.role.value)

    async def _complete_onboarding(self, change: CompleteOnboarding) -> UUID:
        return await self._update(change.account_id, is_onboarding_complete=True)

    async def _update(self, account_id: UUID, **values: Any) -> UUID:
        if not values:
            # Nothing to write, but the account must still exist
            if await self.find_by_id(account_id) is None:
                raise AccountNotFoundError(account_id)
            return account_id

        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise AccountNotFoundError(account_id)
        return account_id

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    async def _find_one(self, *criteria: ColumnElement[bool]) -> Account | None:
        stmt = (
            select(AccountModel)
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    def _map_to_domain(self, model: AccountModel) -> Account:
        return Account(
            id=model.id,
            email=model.email,
            phone=model.phone,
            password_hash=model.password_hash,
            first_name=model.first_name,
            last_name=model.last_name,
            avatar_url=model.avatar_url,
            date_of_birth=model.date_of_birth,
            user_type=UserType(model.user_type),
            role=AccountRole(model.role),
            is_active=model.is_active,
            is_email_verified=model.is_email_verified,
            sso_provider=SsoProvider(model.sso_provider) if model.sso_provider else None,
            sso_provider_id=model.sso_provider_id,
            is_onboarding_complete=model.is_onboarding_complete,
            transient=TransientCredentials(
                email_verification=_one_time_code(
                    model.email_verification_code_hash,
                    model.email_verification_expires_at,
                ),
                login_otp=_one_time_code(
                    model.login_otp_hash,
                    model.login_otp_expires_at,
                ),
            ),
            last_login_at=(
                ensure_tz_aware(model.last_login_at) if model.last_login_at else None
            ),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, account: Account) -> AccountModel:
        transient = account.transient
        return AccountModel(
            id=account.id,
            email=account.email,
            phone=account.phone,
            password_hash=account.password_hash,
            first_name=account.first_name,
            last_name=account.last_name,
            avatar_url=account.avatar_url,
            date_of_birth=account.date_of_birth,
            user_type=account.user_type.value,
            role=account.role.value,
            is_active=account.is_active,
            is_email_verified=account.is_email_verified,
            sso_provider=account.sso_provider.value if account.sso_provider else None,
            sso_provider_id=account.sso_provider_id,
            is_onboarding_complete=account.is_onboarding_complete,
            email_verification_code_hash=(
                transient.email_verification.code_hash
                if transient.email_verification
                else None
            ),
            email_verification_expires_at=(
                transient.email_verification.expires_at
                if transient.email_verification
                else None
            ),
            login_otp_hash=transient.login_otp.code_hash if transient.login_otp else None,
            login_otp_expires_at=(
                transient.login_otp.expires_at if transient.login_otp else None
            ),
            last_login_at=account.last_login_at,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


def _one_time_code(code_hash: str | None, expires_at: datetime | None) -> OneTimeCode | None:
    if code_hash is None or expires_at is None:
        return None
    return OneTimeCode(code_hash=code_hash, expires_at=ensure_tz_aware(expires_at))


def _identifier_of(change: AccountChange) -> str:
    if isinstance(change, CreateAccount):
        return change.account.email or change.account.phone or ""
    email = getattr(change, "email", None)
    phone = getattr(change, "phone", None)
    return email or phone or str(getattr(change, "account_id", ""))
