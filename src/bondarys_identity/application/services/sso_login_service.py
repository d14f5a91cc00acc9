"""Login through an external identity provider."""

import logging
from typing import Protocol

from bondarys_auth import TokenPair
from bondarys_auth.exceptions import InvalidProviderTokenError
from bondarys_auth.time import utc_now
from bondarys_identity.application.ports import GroupProvisioner
from bondarys_identity.application.services.token_service import TokenService
from bondarys_identity.domain.account import (
    Account,
    AccountRepository,
    CreateAccount,
    Email,
    MergeSsoIdentity,
    RecordLogin,
)
from bondarys_identity.infrastructure.sso.schemas import ExternalIdentity

logger = logging.getLogger(__name__)


class IdentityResolver(Protocol):
    async def resolve(self, provider: str, provider_token: str) -> ExternalIdentity: ...


class SsoLoginService:
    """Resolves a provider token to an account and logs it in.

    The account is looked up by provider identity first and by email
    second, so repeated logins with the same provider subject always land
    on the same account. Only an email the provider has verified is used to
    link an existing account or to create a new one; such accounts count as
    verified.
    """

    def __init__(
        self,
        sso_resolver: IdentityResolver,
        account_repository: AccountRepository,
        token_service: TokenService,
        group_provisioner: GroupProvisioner,
    ):
        self._resolver = sso_resolver
        self._accounts = account_repository
        self._tokens = token_service
        self._groups = group_provisioner

    async def login(self, provider: str, provider_token: str) -> tuple[Account, TokenPair]:
        """Log in (or sign up) with a provider token.

        Raises
        ------
        UnsupportedProviderError
            If the provider is unknown or not configured
        InvalidProviderTokenError
            If the provider rejects the token, or a first login comes without
            a provider-verified email
        """
        identity = await self._resolver.resolve(provider, provider_token)

        account = await self._accounts.find_by_sso(identity.provider, identity.subject)
        if account is None and identity.email and identity.email_verified:
            account = await self._accounts.find_by_email(identity.email)

        if account is None:
            account = await self._create(identity)
        else:
            account = await self._merge(account, identity)

        account = await self._accounts.save(RecordLogin(account.id, utc_now()))
        tokens = await self._tokens.issue_pair(account)
        logger.info(
            "Account logged in via %s: %s",
            identity.provider.value,
            account.id,
        )
        return account, tokens

    async def _create(self, identity: ExternalIdentity) -> Account:
        if not identity.email or not identity.email_verified:
            logger.info(
                "%s identity %s has no verified email, cannot create an account",
                identity.provider.value,
                identity.subject,
            )
            raise InvalidProviderTokenError(
                "Provider did not share a verified email address",
                details={"provider": identity.provider.value},
            )

        account = Account.create(
            Email(identity.email),
            first_name=identity.first_name,
            last_name=identity.last_name,
            avatar_url=identity.avatar_url,
            is_email_verified=True,
            sso_provider=identity.provider,
            sso_provider_id=identity.subject,
        )
        account = await self._accounts.save(CreateAccount(account))

        try:
            await self._groups.provision_default_group(account)
        except Exception as e:
            logger.error("Failed to provision default group for %s: %s", account.id, e)

        return account

    async def _merge(self, account: Account, identity: ExternalIdentity) -> Account:
        # Values the user set manually win over provider data
        return await self._accounts.save(
            MergeSsoIdentity(
                account_id=account.id,
                provider=identity.provider,
                provider_id=identity.subject,
                first_name=account.first_name or identity.first_name,
                last_name=account.last_name or identity.last_name,
                avatar_url=account.avatar_url or identity.avatar_url,
                activate=not account.is_active,
            ),
        )
