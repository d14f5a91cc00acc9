from datetime import date
from uuid import UUID

from bondarys_identity.domain.account import (
    Account,
    AccountRepository,
    PhoneNumber,
    UpdateProfile,
)


class UpdateProfileCommand:
    """Command to edit the caller's own profile."""

    def __init__(self, account_repository: AccountRepository):
        self._account_repo = account_repository

    async def execute(  # NOQA: PLR0913
        self,
        account_id: UUID,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
        date_of_birth: date | None = None,
        avatar_url: str | None = None,
    ) -> Account:
        return await self._account_repo.save(
            UpdateProfile(
                account_id=account_id,
                first_name=first_name,
                last_name=last_name,
                phone=PhoneNumber(phone).value if phone else None,
                date_of_birth=date_of_birth,
                avatar_url=avatar_url,
            ),
        )
