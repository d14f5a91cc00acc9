import logging
from uuid import UUID

from bondarys_identity.domain.account import (
    Account,
    AccountRepository,
    CompleteOnboarding,
)

logger = logging.getLogger(__name__)


class CompleteOnboardingCommand:
    """Command to mark the caller's onboarding as finished. Idempotent."""

    def __init__(self, account_repository: AccountRepository):
        self._account_repo = account_repository

    async def execute(self, account_id: UUID) -> Account:
        account = await self._account_repo.save(CompleteOnboarding(account_id))
        logger.info("Onboarding completed for account %s", account_id)
        return account
