"""Signature-verified ID tokens (Google, Apple)."""

import logging
from abc import abstractmethod
from typing import Any

import jwt

from bondarys_auth.exceptions import InvalidProviderTokenError
from bondarys_identity.domain.account import SsoProvider
from bondarys_identity.infrastructure.sso.base import SsoStrategy
from bondarys_identity.infrastructure.sso.jwks import JwksCache
from bondarys_identity.infrastructure.sso.schemas import ExternalIdentity

logger = logging.getLogger(__name__)

_ALLOWED_ALGORITHMS = ("RS256",)
_LEEWAY_SECONDS = 30


def _claim_is_true(value: Any) -> bool:
    # Apple sends "true"/"false" strings, Google sends booleans
    if isinstance(value, str):
        return value.lower() == "true"
    return value is True


class IdTokenStrategy(SsoStrategy):
    """Verifies an OpenID Connect ID token against the provider's JWKS.

    Checks signature, expiry, audience (the configured client id) and
    issuer before any claim is trusted.
    """

    provider: SsoProvider
    issuers: tuple[str, ...]

    def __init__(self, jwks: JwksCache, client_id: str) -> None:
        if not client_id:
            msg = f"{self.provider.value} client id cannot be empty"
            raise ValueError(msg)
        self._jwks = jwks
        self._client_id = client_id

    async def resolve(self, provider_token: str) -> ExternalIdentity:
        claims = await self._verify(provider_token)
        return self._to_identity(claims)

    async def _verify(self, token: str) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            msg = f"Malformed {self.provider.value} token"
            raise InvalidProviderTokenError(msg) from e

        algorithm = str(header.get("alg") or "")
        kid = header.get("kid")
        if algorithm not in _ALLOWED_ALGORITHMS or not kid:
            msg = f"Unexpected {self.provider.value} token header"
            raise InvalidProviderTokenError(msg, details={"alg": algorithm})

        signing_key = await self._jwks.get_signing_key(str(kid))
        try:
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=list(_ALLOWED_ALGORITHMS),
                audience=self._client_id,
                leeway=_LEEWAY_SECONDS,
                options={"require": ["exp", "iat", "iss", "aud", "sub"]},
            )
        except jwt.InvalidTokenError as e:
            msg = f"{self.provider.value} token rejected: {e}"
            raise InvalidProviderTokenError(msg) from e

        if claims.get("iss") not in self.issuers:
            msg = f"Unexpected {self.provider.value} token issuer"
            raise InvalidProviderTokenError(msg, details={"iss": claims.get("iss")})

        return claims

    @abstractmethod
    def _to_identity(self, claims: dict[str, Any]) -> ExternalIdentity:
        pass


class GoogleStrategy(IdTokenStrategy):
    provider = SsoProvider.GOOGLE
    issuers = ("accounts.google.com", "https://accounts.google.com")
    JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"

    def _to_identity(self, claims: dict[str, Any]) -> ExternalIdentity:
        return ExternalIdentity(
            provider=self.provider,
            subject=str(claims["sub"]),
            email=claims.get("email"),
            email_verified=_claim_is_true(claims.get("email_verified")),
            first_name=claims.get("given_name") or "",
            last_name=claims.get("family_name") or "",
            avatar_url=claims.get("picture"),
        )


class AppleStrategy(IdTokenStrategy):
    """Apple only sends the user's name to the app once, never in the token."""

    provider = SsoProvider.APPLE
    issuers = ("https://appleid.apple.com",)
    JWKS_URL = "https://appleid.apple.com/auth/keys"

    def _to_identity(self, claims: dict[str, Any]) -> ExternalIdentity:
        return ExternalIdentity(
            provider=self.provider,
            subject=str(claims["sub"]),
            email=claims.get("email"),
            email_verified=_claim_is_true(claims.get("email_verified")),
        )
