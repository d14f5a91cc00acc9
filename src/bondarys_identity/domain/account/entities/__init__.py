from bondarys_identity.domain.account.entities.account import (
    Account,
    OneTimeCode,
    TransientCredentials,
)

__all__ = [
    "Account",
    "OneTimeCode",
    "TransientCredentials",
]
