"""Token issuance, rotation and revocation."""

import logging
from uuid import UUID

from bondarys_auth import JWTService, TokenPair
from bondarys_auth.exceptions import RefreshTokenRevokedError, UnknownAccountError
from bondarys_auth.repositories import RefreshTokenRepository
from bondarys_auth.time import utc_now
from bondarys_identity.domain.account import Account, AccountRepository

logger = logging.getLogger(__name__)


class TokenService:
    """Mints access/refresh token pairs and keeps the refresh whitelist.

    Refresh tokens are single-use: ``rotate`` consumes the presented token's
    whitelist entry with one conditional delete before minting the next
    pair, so a replayed (or concurrently rotated) token is refused.
    """

    DEFAULT_MAX_SESSIONS = 10

    def __init__(
        self,
        jwt_service: JWTService,
        refresh_token_repository: RefreshTokenRepository,
        account_repository: AccountRepository,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self._jwt = jwt_service
        self._refresh_tokens = refresh_token_repository
        self._accounts = account_repository
        self._max_sessions = max_sessions

    async def issue_pair(self, account: Account) -> TokenPair:
        """Mint a token pair for ``account``.

        Inactive placeholder accounts only receive an access token; their
        whitelist stays empty.
        """
        access_token = self._jwt.create_access_token(account.id)
        if not account.is_active:
            return TokenPair(
                access_token=access_token,
                refresh_token=None,
                expires_in=self._jwt.access_token_expires_in,
            )

        refresh_token, payload = self._jwt.create_refresh_token(account.id)
        await self._refresh_tokens.add(
            account_id=account.id,
            token_id=payload.token_id,  # type: ignore[arg-type]
            issued_at=payload.issued_at,  # type: ignore[arg-type]
            expires_at=payload.exp,
        )
        await self._refresh_tokens.prune(account.id, self._max_sessions, utc_now())

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._jwt.access_token_expires_in,
        )

    async def rotate(self, refresh_token: str) -> tuple[Account, TokenPair]:
        """Exchange a refresh token for a new pair.

        Raises
        ------
        InvalidRefreshTokenError
            If the token's signature or structure is invalid
        RefreshTokenExpiredError
            If the token is expired
        UnknownAccountError
            If the owning account no longer exists
        RefreshTokenRevokedError
            If the token is not (or no longer) in the whitelist
        """
        payload = self._jwt.verify_refresh_token(refresh_token)

        account = await self._accounts.find_by_id(payload.account_id)
        if account is None:
            raise UnknownAccountError(details={"account_id": str(payload.account_id)})

        consumed = await self._refresh_tokens.consume(account.id, payload.token_id)  # type: ignore[arg-type]
        if not consumed:
            logger.warning(
                "Refresh token %s for account %s is not whitelisted (reuse or logout)",
                payload.token_id,
                account.id,
            )
            raise RefreshTokenRevokedError(details={"token_id": payload.token_id})

        if not account.is_active:
            raise RefreshTokenRevokedError(details={"reason": "inactive account"})

        return account, await self.issue_pair(account)

    async def revoke(self, account_id: UUID, refresh_token: str) -> None:
        """Remove one refresh token from the whitelist (logout).

        Idempotent. Expired tokens are still accepted so they can be cleaned
        up; tokens belonging to another account are ignored.

        Raises
        ------
        InvalidRefreshTokenError
            If the token is not a validly signed refresh token
        """
        payload = self._jwt.verify_refresh_token(refresh_token, verify_exp=False)
        if payload.account_id != account_id:
            logger.warning(
                "Account %s tried to revoke a refresh token of %s",
                account_id,
                payload.account_id,
            )
            return
        await self._refresh_tokens.remove(account_id, payload.token_id)  # type: ignore[arg-type]

    async def revoke_all(self, account_id: UUID) -> int:
        """End every session of an account (e.g. after a password reset)."""
        return await self._refresh_tokens.remove_all_for_account(account_id)

