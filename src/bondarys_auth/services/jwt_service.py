"""Signed access and refresh tokens.

Access tokens are short-lived and only name the account. Refresh tokens are
signed with a different key and carry a ``jti``; that identifier, not the
token, is what the refresh-token whitelist stores.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from bondarys_auth.exceptions import (
    AuthError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    RefreshTokenExpiredError,
)
from bondarys_auth.schemas import TokenPayload

ACCESS_TOKEN_TYPE = "access"  # NOQA: S105
REFRESH_TOKEN_TYPE = "refresh"  # NOQA: S105

_REQUIRED_CLAIMS = ["sub", "exp", "type"]


@dataclass(frozen=True)
class _TokenKind:
    name: str
    key: str
    lifetime: timedelta
    invalid_error: type[AuthError]
    expired_error: type[AuthError]
    needs_jti: bool = False


def _from_timestamp(value: int | float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class JWTService:
    """Issue and check the two token kinds (HS256).

    Parameters
    ----------
    secret_key
        Signing key for access tokens.
    refresh_secret_key
        Signing key for refresh tokens; must differ from ``secret_key`` in
        production.
    access_token_expire_minutes, refresh_token_expire_days
        Token lifetimes.
    """

    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        refresh_secret_key: str,
        access_token_expire_minutes: int = 15,
        refresh_token_expire_days: int = 7,
    ):
        if not secret_key or not refresh_secret_key:
            raise ValueError("JWT signing keys cannot be empty")

        self._access = _TokenKind(
            name=ACCESS_TOKEN_TYPE,
            key=secret_key,
            lifetime=timedelta(minutes=access_token_expire_minutes),
            invalid_error=InvalidTokenError,
            expired_error=InvalidTokenError,
        )
        self._refresh = _TokenKind(
            name=REFRESH_TOKEN_TYPE,
            key=refresh_secret_key,
            lifetime=timedelta(days=refresh_token_expire_days),
            invalid_error=InvalidRefreshTokenError,
            expired_error=RefreshTokenExpiredError,
            needs_jti=True,
        )

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds, as reported to clients."""
        return int(self._access.lifetime.total_seconds())

    def create_access_token(
        self,
        account_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        token, _ = self._issue(self._access, account_id, expires_delta)
        return token

    def create_refresh_token(
        self,
        account_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> tuple[str, TokenPayload]:
        """Return the encoded token and its payload, whose ``token_id`` gets whitelisted."""
        return self._issue(self._refresh, account_id, expires_delta)

    def verify_access_token(self, token: str) -> TokenPayload:
        """Decode an access token or raise ``InvalidTokenError``."""
        return self._verify(self._access, token, verify_exp=True)

    def verify_refresh_token(self, token: str, verify_exp: bool = True) -> TokenPayload:
        """Decode a refresh token.

        Raises ``RefreshTokenExpiredError`` for a genuine but expired token and
        ``InvalidRefreshTokenError`` for anything else that fails. Logout
        passes ``verify_exp=False`` so expired tokens can still be dropped
        from the whitelist.
        """
        return self._verify(self._refresh, token, verify_exp=verify_exp)

    def _issue(
        self,
        kind: _TokenKind,
        account_id: UUID,
        expires_delta: timedelta | None,
    ) -> tuple[str, TokenPayload]:
        issued_at = datetime.now(tz=timezone.utc)
        payload = TokenPayload(
            account_id=account_id,
            exp=issued_at + (expires_delta or kind.lifetime),
            token_type=kind.name,
            token_id=uuid.uuid4().hex if kind.needs_jti else None,
            issued_at=issued_at,
        )

        claims: dict = {
            "sub": str(account_id),
            "type": kind.name,
            "iat": issued_at,
            "exp": payload.exp,
        }
        if payload.token_id is not None:
            claims["jti"] = payload.token_id
        return jwt.encode(claims, kind.key, algorithm=self.ALGORITHM), payload

    def _verify(self, kind: _TokenKind, token: str, verify_exp: bool) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                kind.key,
                algorithms=[self.ALGORITHM],
                options={"verify_exp": verify_exp, "require": _REQUIRED_CLAIMS},
            )
            payload = TokenPayload(
                account_id=UUID(claims["sub"]),
                exp=_from_timestamp(claims["exp"]),
                token_type=claims["type"],
                token_id=claims.get("jti"),
                issued_at=_from_timestamp(claims.get("iat")),
            )
        except jwt.ExpiredSignatureError as e:
            raise kind.expired_error(f"{kind.name.capitalize()} token has expired") from e
        except jwt.InvalidTokenError as e:
            raise kind.invalid_error(f"Invalid {kind.name} token: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise kind.invalid_error(f"Malformed {kind.name} token: {e}") from e

        if payload.token_type != kind.name or (kind.needs_jti and not payload.token_id):
            raise kind.invalid_error(f"Not a {kind.name} token")
        return payload
