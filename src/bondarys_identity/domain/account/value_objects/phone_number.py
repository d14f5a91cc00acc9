"""Phone number value object."""

import re
from dataclasses import dataclass

from bondarys_identity.domain.account.exceptions import InvalidPhoneNumberError

# Separators people type between digit groups
_SEPARATORS = re.compile(r"[\s\-().]")
PHONE_PATTERN = re.compile(r"^\+?[0-9]{7,15}$")


@dataclass(frozen=True)
class PhoneNumber:
    """Phone number normalized to digits with an optional leading ``+``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            msg = "Phone number cannot be empty"
            raise InvalidPhoneNumberError(msg)

        normalized = _SEPARATORS.sub("", self.value.strip())
        if normalized.startswith("00"):
            normalized = "+" + normalized[2:]

        if not PHONE_PATTERN.match(normalized):
            msg = f"Invalid phone number: {self.value}"
            raise InvalidPhoneNumberError(msg)

        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
