from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class RefreshTokenData:
    """One whitelisted refresh token, identified by its ``jti`` claim."""

    token_id: str
    account_id: UUID
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class RefreshTokenRepository(ABC):
    """Per-account whitelist of refresh tokens that may still be exchanged.

    An account's whitelist is ordered by ``issued_at``. ``consume`` is the
    only way a token leaves the whitelist during rotation and must be a
    single conditional write, so that two concurrent rotations of the same
    token cannot both succeed.
    """

    @abstractmethod
    async def add(
        self,
        account_id: UUID,
        token_id: str,
        issued_at: datetime,
        expires_at: datetime,
    ) -> None:
        pass

    @abstractmethod
    async def consume(self, account_id: UUID, token_id: str) -> bool:
        """Remove the token if present. Returns whether it was present."""

    @abstractmethod
    async def remove(self, account_id: UUID, token_id: str) -> None:
        """Remove the token; no-op if already absent."""

    @abstractmethod
    async def remove_all_for_account(self, account_id: UUID) -> int:
        pass

    @abstractmethod
    async def list_for_account(self, account_id: UUID) -> list[RefreshTokenData]:
        pass

    @abstractmethod
    async def prune(self, account_id: UUID, keep: int, now: datetime) -> int:
        """Drop expired entries and all but the ``keep`` newest ones."""
