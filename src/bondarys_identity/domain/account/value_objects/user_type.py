from enum import Enum


class UserType(str, Enum):
    """Audience segment chosen at registration."""

    FAMILY = "family"
    CHILDREN = "children"
    SENIORS = "seniors"
