"""Cached JSON Web Key Sets of identity providers."""

import asyncio
import logging
from datetime import datetime, timedelta

import httpx
import jwt

from bondarys_auth.exceptions import InvalidProviderTokenError
from bondarys_auth.time import utc_now

logger = logging.getLogger(__name__)


class JwksCache:
    """Fetches a provider's JWKS document and keeps it for ``ttl``.

    An unknown ``kid`` triggers one refetch, which picks up key rotation
    before the cache would naturally expire.
    """

    DEFAULT_TTL = timedelta(hours=1)

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        self._client = client
        self._url = url
        self._ttl = ttl
        self._keys: dict[str, jwt.PyJWK] = {}
        self._fetched_at: datetime | None = None
        self._lock = asyncio.Lock()

    async def get_signing_key(self, kid: str) -> jwt.PyJWK:
        key = (await self._load(force=False)).get(kid)
        if key is None:
            key = (await self._load(force=True)).get(kid)
        if key is None:
            msg = "Token signed with an unknown key"
            raise InvalidProviderTokenError(msg, details={"kid": kid, "jwks": self._url})
        return key

    async def _load(self, force: bool) -> dict[str, jwt.PyJWK]:
        async with self._lock:
            if not force and self._is_fresh():
                return self._keys

            response = await self._client.get(self._url)
            response.raise_for_status()
            jwk_set = jwt.PyJWKSet.from_dict(response.json())
            self._keys = {key.key_id: key for key in jwk_set.keys if key.key_id}
            self._fetched_at = utc_now()
            logger.debug("Loaded %d signing keys from %s", len(self._keys), self._url)
            return self._keys

    def _is_fresh(self) -> bool:
        return (
            self._fetched_at is not None
            and bool(self._keys)
            and utc_now() - self._fetched_at < self._ttl
        )
