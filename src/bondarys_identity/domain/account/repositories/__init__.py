from bondarys_identity.domain.account.repositories.account_repository import (
    AccountRepository,
)
from bondarys_identity.domain.account.repositories.impersonation_repository import (
    ImpersonationRepository,
)

__all__ = [
    "AccountRepository",
    "ImpersonationRepository",
]
