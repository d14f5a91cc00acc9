from bondarys_auth.exceptions import AccountNotFoundError
from bondarys_identity.domain.account import (
    Account,
    AccountRepository,
    AccountRole,
    ChangeRole,
)


class ChangeAccountRoleCommand:
    """Command to change an account's role, looked up by email."""

    def __init__(self, account_repository: AccountRepository):
        self._account_repo = account_repository

    async def execute(self, email: str, new_role: AccountRole) -> Account:
        account = await self._account_repo.find_by_email(email)
        if not account:
            raise AccountNotFoundError(email)

        return await self._account_repo.save(ChangeRole(account.id, new_role))
