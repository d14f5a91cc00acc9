"""Application services for identity management."""

from bondarys_identity.application.services.authentication_service import (
    AuthenticationService,
)
from bondarys_identity.application.services.credential_verifier import (
    CredentialVerifier,
)
from bondarys_identity.application.services.impersonation_service import (
    ImpersonationService,
)
from bondarys_identity.application.services.otp_service import (
    EmailVerificationResult,
    OtpService,
)
from bondarys_identity.application.services.password_reset_service import (
    PasswordResetService,
)
from bondarys_identity.application.services.registration_service import (
    RegistrationProfile,
    RegistrationService,
)
from bondarys_identity.application.services.sso_login_service import SsoLoginService
from bondarys_identity.application.services.token_service import TokenService

__all__ = [
    "AuthenticationService",
    "CredentialVerifier",
    "EmailVerificationResult",
    "ImpersonationService",
    "OtpService",
    "PasswordResetService",
    "RegistrationProfile",
    "RegistrationService",
    "SsoLoginService",
    "TokenService",
]
