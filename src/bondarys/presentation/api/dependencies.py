"""FastAPI dependency injection for the API.

Provides dependencies for:
- Settings and database sessions (from ``app.state``)
- Request-scoped application services
- Authentication (effective identity from the JWT, with impersonation)
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bondarys_auth import (
    AdminRequiredError,
    InvalidTokenError,
    JWTService,
    OneTimeCodeService,
    PasswordHashingService,
    UnknownAccountError,
)
from bondarys_auth.persistence.sqlalchemy import (
    PasswordResetTokenRepositorySQLAlchemy,
    RefreshTokenRepositorySQLAlchemy,
)
from bondarys_config.settings import Settings
from bondarys_identity.application.context import AuthContext
from bondarys_identity.application.ports import AuditTrail, GroupProvisioner, Notifier
from bondarys_identity.application.services import (
    AuthenticationService,
    CredentialVerifier,
    ImpersonationService,
    OtpService,
    PasswordResetService,
    RegistrationService,
    SsoLoginService,
    TokenService,
)
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    GroupProvisionerSQLAlchemy,
    ImpersonationRepositorySQLAlchemy,
)
from bondarys_identity.infrastructure.sso import SsoResolver

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)


# -----------------------------------------------------------------------------
# Settings, collaborators & database session
# -----------------------------------------------------------------------------


def get_api_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_api_settings)]


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    One session (and transaction) per request. Routers commit after a
    successful operation; anything else is rolled back when the session
    closes.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_audit_trail(request: Request) -> AuditTrail:
    return request.app.state.audit_trail


def get_sso_resolver(request: Request) -> SsoResolver:
    return request.app.state.sso_resolver


NotifierDep = Annotated[Notifier, Depends(get_notifier)]
AuditTrailDep = Annotated[AuditTrail, Depends(get_audit_trail)]
SsoResolverDep = Annotated[SsoResolver, Depends(get_sso_resolver)]


# -----------------------------------------------------------------------------
# Authentication primitives
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret.get_secret_value(),
        refresh_secret_key=settings.jwt_refresh_secret.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service() -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService()


JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]


def get_account_repository(session: DBSession) -> AccountRepositorySQLAlchemy:
    return AccountRepositorySQLAlchemy(session)


AccountRepo = Annotated[AccountRepositorySQLAlchemy, Depends(get_account_repository)]


def get_group_provisioner(session: DBSession) -> GroupProvisioner:
    return GroupProvisionerSQLAlchemy(session)


GroupProvisionerDep = Annotated[GroupProvisioner, Depends(get_group_provisioner)]


# -----------------------------------------------------------------------------
# Application services
# -----------------------------------------------------------------------------


def get_token_service(
    session: DBSession,
    accounts: AccountRepo,
    jwt_service: JWTServiceDep,
    settings: SettingsDep,
) -> TokenService:
    return TokenService(
        jwt_service=jwt_service,
        refresh_token_repository=RefreshTokenRepositorySQLAlchemy(session),
        account_repository=accounts,
        max_sessions=settings.refresh_token_max_sessions,
    )


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


def get_authentication_service(
    accounts: AccountRepo,
    password_service: PasswordServiceDep,
    token_service: TokenServiceDep,
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates password login, token refresh and logout.
    """
    return AuthenticationService(
        account_repository=accounts,
        credential_verifier=CredentialVerifier(accounts, password_service),
        password_service=password_service,
        token_service=token_service,
    )


AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


def get_otp_service(
    accounts: AccountRepo,
    token_service: TokenServiceDep,
    notifier: NotifierDep,
    settings: SettingsDep,
) -> OtpService:
    return OtpService(
        account_repository=accounts,
        code_service=OneTimeCodeService(),
        token_service=token_service,
        notifier=notifier,
        app_name=settings.app_name,
    )


OtpServiceDep = Annotated[OtpService, Depends(get_otp_service)]


def get_sso_login_service(
    accounts: AccountRepo,
    token_service: TokenServiceDep,
    resolver: SsoResolverDep,
    groups: GroupProvisionerDep,
) -> SsoLoginService:
    return SsoLoginService(
        sso_resolver=resolver,
        account_repository=accounts,
        token_service=token_service,
        group_provisioner=groups,
    )


SsoLoginServiceDep = Annotated[SsoLoginService, Depends(get_sso_login_service)]


def get_registration_service(  # NOQA: PLR0913
    accounts: AccountRepo,
    groups: GroupProvisionerDep,
    password_service: PasswordServiceDep,
    token_service: TokenServiceDep,
    otp_service: OtpServiceDep,
    settings: SettingsDep,
) -> RegistrationService:
    return RegistrationService(
        account_repository=accounts,
        password_service=password_service,
        token_service=token_service,
        group_provisioner=groups,
        otp_service=otp_service,
        require_email_verification=settings.registration_requires_email_verification,
    )


RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]


def get_password_reset_service(  # NOQA: PLR0913
    session: DBSession,
    accounts: AccountRepo,
    password_service: PasswordServiceDep,
    token_service: TokenServiceDep,
    notifier: NotifierDep,
    settings: SettingsDep,
) -> PasswordResetService:
    return PasswordResetService(
        account_repository=accounts,
        token_repository=PasswordResetTokenRepositorySQLAlchemy(session),
        password_service=password_service,
        token_service=token_service,
        notifier=notifier,
        frontend_base_url=settings.frontend_base_url,
        expiry_minutes=settings.password_reset_expire_minutes,
    )


PasswordResetServiceDep = Annotated[
    PasswordResetService,
    Depends(get_password_reset_service),
]


def get_impersonation_service(
    session: DBSession,
    accounts: AccountRepo,
    audit_trail: AuditTrailDep,
) -> ImpersonationService:
    return ImpersonationService(
        account_repository=accounts,
        impersonation_repository=ImpersonationRepositorySQLAlchemy(session),
        audit_trail=audit_trail,
    )


ImpersonationServiceDep = Annotated[
    ImpersonationService,
    Depends(get_impersonation_service),
]


# -----------------------------------------------------------------------------
# Current identity (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_auth_context(
    request: Request,
    accounts: AccountRepo,
    jwt_service: JWTServiceDep,
    impersonation: ImpersonationServiceDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthContext:
    """
    Resolve the effective identity of the request.

    Verifies the bearer access token, loads the account and applies an
    active impersonation. Requests made while impersonating are recorded
    on the audit trail.

    Raises
    ------
    InvalidTokenError
        If the token is missing, invalid, expired or not an access token
    UnknownAccountError
        If the token's account no longer exists
    """
    if credentials is None:
        raise InvalidTokenError("Authentication required")

    payload = jwt_service.verify_access_token(credentials.credentials)

    account = await accounts.find_by_id(payload.account_id)
    if account is None:
        logger.warning("Account not found for token: %s", payload.account_id)
        raise UnknownAccountError(details={"account_id": str(payload.account_id)})

    context = await impersonation.resolve(account)
    impersonation.record_request(context, request.method, request.url.path)
    return context


# Type alias for the injected identity
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(context: CurrentAuth) -> AuthContext:
    """Require the operator (not the impersonated account) to be an admin."""
    if not context.operator.is_admin:
        raise AdminRequiredError
    return context


AdminOperator = Annotated[AuthContext, Depends(require_admin)]
