import logging

import httpx

from bondarys_auth.exceptions import InvalidProviderTokenError
from bondarys_identity.domain.account import SsoProvider
from bondarys_identity.infrastructure.sso.base import SsoStrategy
from bondarys_identity.infrastructure.sso.schemas import (
    ExternalIdentity,
    split_display_name,
)

logger = logging.getLogger(__name__)


class FacebookStrategy(SsoStrategy):
    """Exchanges a Facebook access token at the Graph API ``/me`` endpoint."""

    FIELDS = "id,name,email,picture"

    def __init__(self, client: httpx.AsyncClient, graph_url: str) -> None:
        self._client = client
        self._me_url = f"{graph_url.rstrip('/')}/me"

    async def resolve(self, provider_token: str) -> ExternalIdentity:
        response = await self._client.get(
            self._me_url,
            params={"fields": self.FIELDS, "access_token": provider_token},
        )
        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error or not isinstance(data, dict) or "error" in data:
            error = data.get("error") if isinstance(data, dict) else None
            msg = "Facebook rejected the access token"
            raise InvalidProviderTokenError(
                msg,
                details={"status": response.status_code, "error": error},
            )

        if not data.get("id"):
            msg = "Facebook response is missing the user id"
            raise InvalidProviderTokenError(msg)

        first_name, last_name = split_display_name(data.get("name"))
        picture = (data.get("picture") or {}).get("data") or {}
        email = data.get("email")
        return ExternalIdentity(
            provider=SsoProvider.FACEBOOK,
            subject=str(data["id"]),
            email=email,
            # Graph only returns confirmed addresses
            email_verified=bool(email),
            first_name=first_name,
            last_name=last_name,
            avatar_url=picture.get("url"),
        )
