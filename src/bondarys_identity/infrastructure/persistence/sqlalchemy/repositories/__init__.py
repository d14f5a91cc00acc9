from bondarys_identity.infrastructure.persistence.sqlalchemy.repositories.account_repository import (  # NOQA: E501
    AccountRepositorySQLAlchemy,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.repositories.impersonation_repository import (  # NOQA: E501
    ImpersonationRepositorySQLAlchemy,
)

__all__ = [
    "AccountRepositorySQLAlchemy",
    "ImpersonationRepositorySQLAlchemy",
]
