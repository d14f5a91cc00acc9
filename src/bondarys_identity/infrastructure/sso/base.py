from abc import ABC, abstractmethod

from bondarys_identity.infrastructure.sso.schemas import ExternalIdentity


class SsoStrategy(ABC):
    """Exchanges one provider's token for an ``ExternalIdentity``."""

    @abstractmethod
    async def resolve(self, provider_token: str) -> ExternalIdentity:
        """Validate the token with the provider.

        Raises
        ------
        InvalidProviderTokenError
            If the provider rejects the token or it fails validation
        """
