"""Single sign-on: provider token verification and identity normalization."""

from bondarys_identity.infrastructure.sso.base import SsoStrategy
from bondarys_identity.infrastructure.sso.facebook import FacebookStrategy
from bondarys_identity.infrastructure.sso.jwks import JwksCache
from bondarys_identity.infrastructure.sso.oidc import AppleStrategy, GoogleStrategy
from bondarys_identity.infrastructure.sso.resolver import SsoResolver
from bondarys_identity.infrastructure.sso.schemas import (
    ExternalIdentity,
    split_display_name,
)

__all__ = [
    "AppleStrategy",
    "ExternalIdentity",
    "FacebookStrategy",
    "GoogleStrategy",
    "JwksCache",
    "SsoResolver",
    "SsoStrategy",
    "split_display_name",
]
