from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from bondarys_identity.domain.account import Account


@dataclass(frozen=True)
class GroupMembership:
    group_id: UUID
    name: str
    role: str


class GroupProvisioner(ABC):
    """Creates the default owned group for a newly registered account.

    Also answers which groups an account belongs to, for the profile view.
    """

    @abstractmethod
    async def provision_default_group(self, account: Account) -> None:
        pass

    @abstractmethod
    async def memberships(self, account_id: UUID) -> list[GroupMembership]:
        """Groups the account is a member of, oldest first."""
