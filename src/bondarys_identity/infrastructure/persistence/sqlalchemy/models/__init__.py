from bondarys_identity.infrastructure.persistence.sqlalchemy.models.account_model import (  # NOQA: E501
    AccountModel,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.models.group_model import (
    GroupMemberModel,
    GroupModel,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy.models.impersonation_session_model import (  # NOQA: E501
    ImpersonationSessionModel,
)

__all__ = [
    "AccountModel",
    "GroupMemberModel",
    "GroupModel",
    "ImpersonationSessionModel",
]
