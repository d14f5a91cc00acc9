"""bcrypt password hashing and the account password policy."""

import re
import secrets
from dataclasses import dataclass

import bcrypt

from bondarys_auth.exceptions import WeakPasswordError

# $2b$12$<53 chars of salt and digest>
_BCRYPT_COST = re.compile(r"^\$2[abxy]?\$(\d{2})\$")


@dataclass(frozen=True)
class PasswordPolicy:
    """Length rules applied before a password is hashed.

    bcrypt silently ignores anything past 72 bytes (newer releases refuse
    it outright), so the upper bound is on the encoded length.
    """

    min_length: int = 8
    max_bytes: int = 72

    def check(self, password: str) -> None:
        if not password:
            raise WeakPasswordError("Password cannot be empty")
        if len(password) < self.min_length:
            raise WeakPasswordError(
                f"Password must be at least {self.min_length} characters"
            )
        if len(password.encode("utf-8")) > self.max_bytes:
            raise WeakPasswordError(f"Password cannot exceed {self.max_bytes} bytes")


class PasswordHashingService:
    """Hash and check account passwords.

    Parameters
    ----------
    rounds
        bcrypt cost factor. Tests pass 4 to stay fast.
    policy
        Rules enforced by :meth:`hash` and :meth:`validate_strength`.
    """

    def __init__(self, rounds: int = 12, policy: PasswordPolicy | None = None):
        self._rounds = rounds
        self._policy = policy or PasswordPolicy()

    @property
    def policy(self) -> PasswordPolicy:
        return self._policy

    def validate_strength(self, password: str) -> None:
        """Raise ``WeakPasswordError`` when the policy rejects ``password``."""
        self._policy.check(password)

    def hash(self, password: str) -> str:
        self.validate_strength(password)
        digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self._rounds))
        return digest.decode("ascii")

    def hash_unusable_password(self) -> str:
        """Hash a random secret for accounts registered without a password.

        Nobody knows the secret, so only the reset flow can give the account
        a working password.
        """
        return self.hash(secrets.token_urlsafe(32))

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (TypeError, ValueError):
            # Not a bcrypt hash
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        match = _BCRYPT_COST.match(password_hash)
        if match is None:
            return True
        return int(match.group(1)) != self._rounds
