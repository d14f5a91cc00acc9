from enum import Enum


class SsoProvider(str, Enum):
    """External identity providers accepted for single sign-on."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    APPLE = "apple"
