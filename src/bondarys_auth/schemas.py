"""Auth schemas and data structures.

These are simple data classes used for transferring token data between
components.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    Attributes
    ----------
    account_id
        The unique identifier of the account (``sub`` claim)
    exp
        Token expiration timestamp
    token_type
        Either "access" or "refresh"
    token_id
        The ``jti`` claim; only refresh tokens carry one
    issued_at
        Token issue timestamp
    """

    account_id: UUID
    exp: datetime
    token_type: str  # "access" or "refresh"
    token_id: str | None = None
    issued_at: datetime | None = None

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) > self.exp

    def is_access_token(self) -> bool:
        return self.token_type == "access"

    def is_refresh_token(self) -> bool:
        return self.token_type == "refresh"


@dataclass(frozen=True)
class TokenPair:
    """A freshly minted access token and (optionally) refresh token.

    ``refresh_token`` is ``None`` when the account may not hold a refresh
    token, e.g. an inactive placeholder account.
    """

    access_token: str
    refresh_token: str | None
    expires_in: int
    token_type: str = "bearer"
