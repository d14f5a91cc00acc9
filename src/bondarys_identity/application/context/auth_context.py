from dataclasses import dataclass
from uuid import UUID

from bondarys_identity.domain.account import Account


@dataclass(frozen=True)
class AuthContext:
    """Identity a request acts under.

    ``account`` is the effective identity used for authorization. While an
    admin impersonates someone, ``operator`` is the admin and ``account`` the
    target; otherwise both are the same account.
    """

    account: Account
    operator: Account

    @classmethod
    def for_account(cls, account: Account) -> "AuthContext":
        return cls(account=account, operator=account)

    @property
    def account_id(self) -> UUID:
        return self.account.id

    @property
    def operator_id(self) -> UUID:
        return self.operator.id

    @property
    def is_impersonating(self) -> bool:
        return self.account.id != self.operator.id
