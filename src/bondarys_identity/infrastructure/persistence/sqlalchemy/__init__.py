"""SQLAlchemy persistence for the identity package.

All models are declared on ``bondarys_auth.persistence.sqlalchemy.Base``.
"""

from bondarys_identity.infrastructure.persistence.sqlalchemy.database import (
    create_engine_for,
    create_tables,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.group_provisioner import (
    GroupProvisionerSQLAlchemy,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
    GroupMemberModel,
    GroupModel,
    ImpersonationSessionModel,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.repositories import (
    AccountRepositorySQLAlchemy,
    ImpersonationRepositorySQLAlchemy,
)

__all__ = [
    "AccountModel",
    "AccountRepositorySQLAlchemy",
    "GroupMemberModel",
    "GroupModel",
    "GroupProvisionerSQLAlchemy",
    "ImpersonationRepositorySQLAlchemy",
    "ImpersonationSessionModel",
    "create_engine_for",
    "create_tables",
]
