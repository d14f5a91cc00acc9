"""Short-lived numeric codes for OTP login and email verification."""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta


class OneTimeCodeService:
    """Generates, hashes and compares six-digit one-time codes.

    Codes are drawn uniformly from ``000000``-``999999`` and are only ever
    persisted as SHA-256 digests. Both login OTPs and email verification
    codes share the same fixed validity window.
    """

    CODE_LENGTH = 6
    TTL = timedelta(minutes=10)

    def generate(self) -> str:
        return f"{secrets.randbelow(10**self.CODE_LENGTH):0{self.CODE_LENGTH}d}"

    def hash(self, code: str) -> str:
        return hashlib.sha256(code.encode("utf-8")).hexdigest()

    def matches(self, code: str, code_hash: str) -> bool:
        """Constant-time comparison of a submitted code against a stored hash."""
        return hmac.compare_digest(self.hash(code), code_hash)

    def expiry(self, now: datetime) -> datetime:
        return now + self.TTL

    def is_well_formed(self, code: str) -> bool:
        return len(code) == self.CODE_LENGTH and code.isascii() and code.isdigit()
