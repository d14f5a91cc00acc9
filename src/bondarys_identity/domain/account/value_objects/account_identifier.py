"""Lookup key for flows that accept either an email or a phone number."""

from __future__ import annotations

from dataclasses import dataclass

from bondarys_identity.domain.account.exceptions import InvalidIdentifierError
from bondarys_identity.domain.account.value_objects.email import Email
from bondarys_identity.domain.account.value_objects.phone_number import PhoneNumber


@dataclass(frozen=True)
class AccountIdentifier:
    """Exactly one of ``email`` or ``phone``."""

    email: Email | None = None
    phone: PhoneNumber | None = None

    def __post_init__(self) -> None:
        if (self.email is None) == (self.phone is None):
            msg = "Exactly one of email or phone is required"
            raise InvalidIdentifierError(msg)

    @classmethod
    def from_input(
        cls,
        email: str | None = None,
        phone: str | None = None,
    ) -> AccountIdentifier:
        """Build from raw request input; email wins when both are given."""
        if email:
            return cls(email=Email(email))
        if phone:
            return cls(phone=PhoneNumber(phone))
        msg = "Either email or phone is required"
        raise InvalidIdentifierError(msg)

    @property
    def is_email(self) -> bool:
        return self.email is not None

    @property
    def value(self) -> str:
        return self.email.value if self.email is not None else self.phone.value  # type: ignore[union-attr]

    def __str__(self) -> str:
        return self.value
