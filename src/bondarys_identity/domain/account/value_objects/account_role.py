from enum import Enum


class AccountRole(str, Enum):
    """Account roles (who may use admin operations and who not)."""

    USER = "user"
    ADMIN = "admin"
