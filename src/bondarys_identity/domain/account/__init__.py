"""Account domain: entity, value objects, typed changes and repositories."""

from bondarys_identity.domain.account.changes import (
    AccountChange,
    ChangePassword,
    ChangeRole,
    CompleteOnboarding,
    CreateAccount,
    IssueEmailVerification,
    IssueLoginOtp,
    MergeSsoIdentity,
    PromoteAccount,
    RecordLogin,
    UpdateProfile,
)
from bondarys_identity.domain.account.entities import (
    Account,
    OneTimeCode,
    TransientCredentials,
)
from bondarys_identity.domain.account.exceptions import (
    InvalidEmailError,
    InvalidIdentifierError,
    InvalidPhoneNumberError,
)
from bondarys_identity.domain.account.repositories import (
    AccountRepository,
    ImpersonationRepository,
)
from bondarys_identity.domain.account.value_objects import (
    AccountIdentifier,
    AccountRole,
    Email,
    PhoneNumber,
    SsoProvider,
    UserType,
)

__all__ = [
    "Account",
    "AccountChange",
    "AccountIdentifier",
    "AccountRepository",
    "AccountRole",
    "ChangePassword",
    "ChangeRole",
    "CompleteOnboarding",
    "CreateAccount",
    "Email",
    "ImpersonationRepository",
    "InvalidEmailError",
    "InvalidIdentifierError",
    "InvalidPhoneNumberError",
    "IssueEmailVerification",
    "IssueLoginOtp",
    "MergeSsoIdentity",
    "OneTimeCode",
    "PhoneNumber",
    "PromoteAccount",
    "RecordLogin",
    "SsoProvider",
    "TransientCredentials",
    "UpdateProfile",
    "UserType",
]
