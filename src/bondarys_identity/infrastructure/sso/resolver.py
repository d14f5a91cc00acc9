"""SSO resolver dispatching to one strategy per provider."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from bondarys_auth.exceptions import InvalidProviderTokenError, UnsupportedProviderError
from bondarys_config.settings import Settings
from bondarys_identity.domain.account import SsoProvider
from bondarys_identity.infrastructure.sso.base import SsoStrategy
from bondarys_identity.infrastructure.sso.facebook import FacebookStrategy
from bondarys_identity.infrastructure.sso.jwks import JwksCache
from bondarys_identity.infrastructure.sso.oidc import AppleStrategy, GoogleStrategy
from bondarys_identity.infrastructure.sso.schemas import ExternalIdentity

logger = logging.getLogger(__name__)


class SsoResolver:
    """Maps ``(provider, token)`` to a normalized ``ExternalIdentity``.

    Built once per process; holds the strategies (and through them the
    shared HTTP client and JWKS caches).
    """

    def __init__(self, strategies: Mapping[SsoProvider, SsoStrategy]) -> None:
        self._strategies = dict(strategies)

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient) -> SsoResolver:
        """Create a resolver with every provider the settings configure.

        Google and Apple need a client id (the expected token audience);
        providers without one are left out and rejected as unsupported.
        """
        strategies: dict[SsoProvider, SsoStrategy] = {
            SsoProvider.FACEBOOK: FacebookStrategy(client, settings.facebook_graph_url),
        }
        if settings.google_client_id:
            strategies[SsoProvider.GOOGLE] = GoogleStrategy(
                JwksCache(client, GoogleStrategy.JWKS_URL),
                settings.google_client_id,
            )
        if settings.apple_client_id:
            strategies[SsoProvider.APPLE] = AppleStrategy(
                JwksCache(client, AppleStrategy.JWKS_URL),
                settings.apple_client_id,
            )
        logger.info(
            "SSO providers enabled: %s",
            ", ".join(sorted(p.value for p in strategies)),
        )
        return cls(strategies)

    @property
    def providers(self) -> list[SsoProvider]:
        return list(self._strategies)

    async def resolve(self, provider: str, provider_token: str) -> ExternalIdentity:
        """Resolve a provider token.

        Raises
        ------
        UnsupportedProviderError
            If the provider is unknown or not configured
        InvalidProviderTokenError
            If the provider rejects the token
        """
        try:
            provider_enum = SsoProvider(provider)
        except ValueError:
            raise UnsupportedProviderError(provider) from None

        strategy = self._strategies.get(provider_enum)
        if strategy is None:
            raise UnsupportedProviderError(provider)

        if not provider_token:
            raise InvalidProviderTokenError

        return await strategy.resolve(provider_token)
