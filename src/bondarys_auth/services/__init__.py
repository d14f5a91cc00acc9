"""Auth services - pure logic with no persistence dependencies."""

from bondarys_auth.services.jwt_service import JWTService
from bondarys_auth.services.one_time_code_service import OneTimeCodeService
from bondarys_auth.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "OneTimeCodeService",
    "PasswordHashingService",
]
