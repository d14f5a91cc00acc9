"""Account domain exceptions.

Value-object validation errors are both ``ValueError`` (so pydantic
validators surface them as field errors) and ``ValidationFailedError`` (so
the API maps them to a 400 response).
"""

from bondarys_auth.exceptions import ValidationFailedError


class InvalidEmailError(ValidationFailedError, ValueError):
    """Raised when email format is invalid."""


class InvalidPhoneNumberError(ValidationFailedError, ValueError):
    """Raised when a phone number cannot be normalized."""


class InvalidIdentifierError(ValidationFailedError, ValueError):
    """Raised when neither an email nor a phone number is supplied."""
