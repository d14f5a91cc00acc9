from dataclasses import dataclass

from bondarys_identity.domain.account import SsoProvider


@dataclass(frozen=True)
class ExternalIdentity:
    """Provider-independent view of an identity asserted by an SSO provider.

    ``email_verified`` is true only when the provider vouches for the
    address; an unverified email is never used to find or create an account.
    """

    provider: SsoProvider
    subject: str
    email: str | None
    email_verified: bool = False
    first_name: str = ""
    last_name: str = ""
    avatar_url: str | None = None


def split_display_name(name: str | None) -> tuple[str, str]:
    """Split "Jane Q Doe" into ("Jane", "Q Doe")."""
    parts = (name or "").strip().split(maxsplit=1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]
