"""Value objects for the account domain."""

from bondarys_identity.domain.account.value_objects.account_identifier import (
    AccountIdentifier,
)
from bondarys_identity.domain.account.value_objects.account_role import AccountRole
from bondarys_identity.domain.account.value_objects.email import Email
from bondarys_identity.domain.account.value_objects.phone_number import PhoneNumber
from bondarys_identity.domain.account.value_objects.sso_provider import SsoProvider
from bondarys_identity.domain.account.value_objects.user_type import UserType

__all__ = [
    "AccountIdentifier",
    "AccountRole",
    "Email",
    "PhoneNumber",
    "SsoProvider",
    "UserType",
]
