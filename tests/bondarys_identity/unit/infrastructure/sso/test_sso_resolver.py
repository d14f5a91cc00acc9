"""Unit tests for SsoResolver."""

from unittest.mock import AsyncMock

import httpx
import pytest

from bondarys_auth import InvalidProviderTokenError, UnsupportedProviderError
from bondarys_config import Settings
from bondarys_identity.domain.account import SsoProvider
from bondarys_identity.infrastructure.sso import (
    ExternalIdentity,
    SsoResolver,
    SsoStrategy,
)

IDENTITY = ExternalIdentity(provider=SsoProvider.GOOGLE, subject="s", email="c@example.com")


class TestSsoResolver:
    def setup_method(self):
        self.google = AsyncMock(spec=SsoStrategy)
        self.google.resolve.return_value = IDENTITY
        self.resolver = SsoResolver({SsoProvider.GOOGLE: self.google})

    @pytest.mark.asyncio
    async def test_dispatches_to_strategy(self):
        identity = await self.resolver.resolve("google", "id-token")

        assert identity == IDENTITY
        self.google.resolve.assert_awaited_once_with("id-token")

    @pytest.mark.asyncio
    async def test_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError) as exc_info:
            await self.resolver.resolve("myspace", "token")

        assert exc_info.value.provider == "myspace"

    @pytest.mark.asyncio
    async def test_known_but_unconfigured_provider(self):
        with pytest.raises(UnsupportedProviderError):
            await self.resolver.resolve("apple", "token")

    @pytest.mark.asyncio
    async def test_empty_token(self):
        with pytest.raises(InvalidProviderTokenError):
            await self.resolver.resolve("google", "")

        self.google.resolve.assert_not_called()


class TestSsoResolverFromSettings:
    @pytest.mark.asyncio
    async def test_only_configured_providers(self):
        async with httpx.AsyncClient() as client:
            resolver = SsoResolver.from_settings(
                Settings(google_client_id="google-client", apple_client_id=""),
                client,
            )

        assert set(resolver.providers) == {SsoProvider.FACEBOOK, SsoProvider.GOOGLE}

    @pytest.mark.asyncio
    async def test_all_providers(self):
        async with httpx.AsyncClient() as client:
            resolver = SsoResolver.from_settings(
                Settings(google_client_id="google-client", apple_client_id="apple-client"),
                client,
            )

        assert set(resolver.providers) == set(SsoProvider)
