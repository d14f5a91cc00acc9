"""Admin impersonation (support sessions)."""

import logging
from uuid import UUID

from bondarys_auth.exceptions import (
    AccountNotFoundError,
    AdminRequiredError,
    ImpersonationNotAllowedError,
)
from bondarys_auth.time import utc_now
from bondarys_identity.application.context import AuthContext
from bondarys_identity.application.ports import AuditTrail
from bondarys_identity.domain.account import (
    Account,
    AccountRepository,
    ImpersonationRepository,
)

logger = logging.getLogger(__name__)

IMPERSONATION_STARTED = "impersonation.started"
IMPERSONATION_STOPPED = "impersonation.stopped"
IMPERSONATED_REQUEST = "impersonation.request"


class ImpersonationService:
    """Lets an admin act as another account, reversibly.

    The association is keyed by the operator's account id, so it follows
    the operator across access tokens until it is stopped.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        impersonation_repository: ImpersonationRepository,
        audit_trail: AuditTrail,
    ):
        self._accounts = account_repository
        self._sessions = impersonation_repository
        self._audit = audit_trail

    async def start(self, operator: Account, target_id: UUID) -> Account:
        """Start acting as ``target_id``, replacing any active impersonation.

        Raises
        ------
        AdminRequiredError
            If the operator is not an admin
        AccountNotFoundError
            If the target does not exist
        ImpersonationNotAllowedError
            If the operator targets themselves
        """
        if not operator.is_admin:
            raise AdminRequiredError

        if target_id == operator.id:
            raise ImpersonationNotAllowedError("Cannot impersonate yourself")

        target = await self._accounts.find_by_id(target_id)
        if target is None:
            raise AccountNotFoundError(target_id)

        await self._sessions.start(operator.id, target.id, utc_now())
        self._audit.record(
            IMPERSONATION_STARTED,
            operator_id=operator.id,
            target_id=target.id,
        )
        logger.info("Admin %s started impersonating %s", operator.id, target.id)
        return target

    async def stop(self, operator: Account) -> None:
        """End the operator's impersonation; a no-op when none is active."""
        previous = await self._sessions.stop(operator.id)
        self._audit.record(
            IMPERSONATION_STOPPED,
            operator_id=operator.id,
            target_id=previous,
        )
        if previous is not None:
            logger.info("Admin %s stopped impersonating %s", operator.id, previous)

    async def resolve(self, account: Account) -> AuthContext:
        """Determine the effective identity for an authenticated account."""
        if not account.is_admin:
            return AuthContext.for_account(account)

        target_id = await self._sessions.get_target(account.id)
        if target_id is None:
            return AuthContext.for_account(account)

        target = await self._accounts.find_by_id(target_id)
        if target is None:
            # Target vanished; fall back to the operator's own identity
            logger.warning(
                "Impersonation target %s of %s no longer exists",
                target_id,
                account.id,
            )
            await self._sessions.stop(account.id)
            return AuthContext.for_account(account)

        return AuthContext(account=target, operator=account)

    def record_request(self, context: AuthContext, method: str, path: str) -> None:
        """Audit a request made while impersonating."""
        if not context.is_impersonating:
            return
        self._audit.record(
            IMPERSONATED_REQUEST,
            operator_id=context.operator_id,
            target_id=context.account_id,
            details={"method": method, "path": path},
        )
