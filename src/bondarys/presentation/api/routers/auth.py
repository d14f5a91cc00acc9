"""Authentication router: sign-in paths, sessions, verification and profile."""

import logging

from fastapi import APIRouter, status

from bondarys.presentation.api.dependencies import (
    AccountRepo,
    AuthService,
    CurrentAuth,
    DBSession,
    GroupProvisionerDep,
    OtpServiceDep,
    PasswordResetServiceDep,
    RegistrationServiceDep,
    SsoLoginServiceDep,
    SsoResolverDep,
)
from bondarys.presentation.api.schemas.auth import (
    AccountResponse,
    AuthResponse,
    ChangePasswordRequest,
    CheckUserResponse,
    EmailRequest,
    GroupMembershipResponse,
    IdentifierRequest,
    LoginRequest,
    LogoutRequest,
    MeResponse,
    OtpLoginRequest,
    ProfileResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SsoLoginRequest,
    SsoProviderInfo,
    SsoProvidersResponse,
    TokenResponse,
    UpdateProfileRequest,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from bondarys.presentation.api.schemas.common import ErrorResponse, MessageResponse
from bondarys_identity.application.commands import (
    CompleteOnboardingCommand,
    UpdateProfileCommand,
)
from bondarys_identity.application.services import RegistrationProfile
from bondarys_identity.domain.account import AccountIdentifier, SsoProvider

logger = logging.getLogger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If the email exists, a password reset link has been sent."

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Authentication failed"}}
_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid input"}}


def _identifier(request: IdentifierRequest) -> AccountIdentifier:
    return AccountIdentifier.from_input(
        email=str(request.email) if request.email else None,
        phone=request.phone,
    )


# -----------------------------------------------------------------------------
# Sign-in paths
# -----------------------------------------------------------------------------


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        **_BAD_REQUEST,
        409: {"model": ErrorResponse, "description": "Email or phone already registered"},
    },
)
async def register(
    request: RegisterRequest,
    registration: RegistrationServiceDep,
    session: DBSession,
) -> AuthResponse:
    """
    Register an account, or claim the placeholder left by an earlier
    one-time-code request for the same email or phone.
    """
    account, tokens = await registration.register(
        RegistrationProfile(
            email=str(request.email),
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            date_of_birth=request.date_of_birth,
            user_type=request.user_type,
        ),
    )
    await session.commit()
    return AuthResponse.create(account, tokens)


@router.post(
    "/login",
    summary="Sign in with email and password",
    responses={
        **_UNAUTHORIZED,
        403: {"model": ErrorResponse, "description": "Email not verified"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    account, tokens = await auth_service.login(str(request.email), request.password)
    await session.commit()
    return AuthResponse.create(account, tokens)


@router.post(
    "/sso",
    summary="Sign in with a Google, Facebook or Apple token",
    responses={
        **_UNAUTHORIZED,
        400: {"model": ErrorResponse, "description": "Unsupported provider"},
    },
)
async def sso_login(
    request: SsoLoginRequest,
    sso_service: SsoLoginServiceDep,
    session: DBSession,
) -> AuthResponse:
    """
    Exchange a provider token for a session.

    First-time identities get a new, verified account; known ones have the
    provider metadata merged in.
    """
    account, tokens = await sso_service.login(request.provider, request.provider_token)
    await session.commit()
    return AuthResponse.create(account, tokens)


@router.get(
    "/sso/providers",
    summary="List the enabled single sign-on providers",
)
async def sso_providers(resolver: SsoResolverDep) -> SsoProvidersResponse:
    enabled = set(resolver.providers)
    return SsoProvidersResponse(
        providers=[
            SsoProviderInfo.from_provider(provider)
            for provider in SsoProvider
            if provider in enabled
        ],
    )


@router.post(
    "/check-user",
    summary="Check whether an active account exists",
    responses=_BAD_REQUEST,
)
async def check_user(
    request: IdentifierRequest,
    auth_service: AuthService,
) -> CheckUserResponse:
    exists = await auth_service.check_user(_identifier(request))
    return CheckUserResponse(exists=exists)


@router.post(
    "/otp/request",
    summary="Send a one-time sign-in code",
    responses=_BAD_REQUEST,
)
async def request_otp(
    request: IdentifierRequest,
    otp_service: OtpServiceDep,
    session: DBSession,
) -> MessageResponse:
    """
    Send a six-digit code valid for ten minutes.

    The response is identical whether or not the account existed.
    """
    message = await otp_service.request_login_otp(_identifier(request))
    await session.commit()
    return MessageResponse(message=message)


@router.post(
    "/otp/login",
    summary="Sign in with a one-time code",
    responses={
        **_UNAUTHORIZED,
        400: {"model": ErrorResponse, "description": "Code expired"},
    },
)
async def otp_login(
    request: OtpLoginRequest,
    otp_service: OtpServiceDep,
    session: DBSession,
) -> AuthResponse:
    account, tokens = await otp_service.verify_login_otp(_identifier(request), request.otp)
    await session.commit()
    return AuthResponse.create(account, tokens)


# -----------------------------------------------------------------------------
# Sessions
# -----------------------------------------------------------------------------


@router.post(
    "/refresh",
    summary="Rotate the token pair",
    responses=_UNAUTHORIZED,
)
async def refresh(
    request: RefreshRequest,
    auth_service: AuthService,
    session: DBSession,
) -> TokenResponse:
    """
    Exchange a refresh token for a new pair.

    Each refresh token works once; presenting it again fails.
    """
    tokens = await auth_service.refresh(request.refresh_token)
    await session.commit()
    return TokenResponse.from_pair(tokens)


@router.post(
    "/logout",
    summary="End the current session",
    responses=_UNAUTHORIZED,
)
async def logout(
    request: LogoutRequest,
    context: CurrentAuth,
    auth_service: AuthService,
    session: DBSession,
) -> MessageResponse:
    await auth_service.logout(context.operator_id, request.refresh_token)
    await session.commit()
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    summary="Get the current account",
    responses=_UNAUTHORIZED,
)
async def get_me(context: CurrentAuth) -> MeResponse:
    response = MeResponse.from_account(context.account)
    if context.is_impersonating:
        response.impersonated_by = context.operator_id
    return response


# -----------------------------------------------------------------------------
# Email verification
# -----------------------------------------------------------------------------


@router.post(
    "/verify-email",
    summary="Verify an email address with a code",
    responses={
        **_UNAUTHORIZED,
        400: {"model": ErrorResponse, "description": "Code expired"},
    },
)
async def verify_email(
    request: VerifyEmailRequest,
    otp_service: OtpServiceDep,
    session: DBSession,
) -> VerifyEmailResponse:
    """
    Mark the email verified and sign in.

    Already verified addresses get a message without tokens.
    """
    result = await otp_service.verify_email(str(request.email), request.code)
    await session.commit()

    if result.account is None or result.tokens is None:
        return VerifyEmailResponse(message=result.message)

    return VerifyEmailResponse(
        message=result.message,
        account=AccountResponse.from_account(result.account),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        token_type=result.tokens.token_type,
        expires_in=result.tokens.expires_in,
    )


@router.post(
    "/resend-verification",
    summary="Send a new email verification code",
    responses=_BAD_REQUEST,
)
async def resend_verification(
    request: EmailRequest,
    otp_service: OtpServiceDep,
    session: DBSession,
) -> MessageResponse:
    message = await otp_service.request_email_verification(str(request.email))
    await session.commit()
    return MessageResponse(message=message)


# -----------------------------------------------------------------------------
# Passwords & profile
# -----------------------------------------------------------------------------


@router.post(
    "/forgot-password",
    summary="Request a password reset link",
    responses=_BAD_REQUEST,
)
async def forgot_password(
    request: EmailRequest,
    reset_service: PasswordResetServiceDep,
    session: DBSession,
) -> MessageResponse:
    """Always answers the same way to prevent email enumeration."""
    await reset_service.request_reset(str(request.email))
    await session.commit()
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    summary="Set a new password with a reset token",
    responses={400: {"model": ErrorResponse, "description": "Invalid token or weak password"}},
)
async def reset_password(
    request: ResetPasswordRequest,
    reset_service: PasswordResetServiceDep,
    session: DBSession,
) -> MessageResponse:
    """Changes the password and ends every session of the account."""
    await reset_service.reset_password(request.token, request.password)
    await session.commit()
    return MessageResponse(message="Password has been reset successfully")


@router.post(
    "/change-password",
    summary="Change the password",
    responses={**_UNAUTHORIZED, **_BAD_REQUEST},
)
async def change_password(
    request: ChangePasswordRequest,
    context: CurrentAuth,
    auth_service: AuthService,
    session: DBSession,
) -> MessageResponse:
    await auth_service.change_password(
        context.account_id,
        request.current_password,
        request.new_password,
    )
    await session.commit()
    return MessageResponse(message="Password changed successfully")


@router.put(
    "/profile",
    summary="Update the current account's profile",
    responses={**_UNAUTHORIZED, **_BAD_REQUEST},
)
async def update_profile(
    request: UpdateProfileRequest,
    context: CurrentAuth,
    accounts: AccountRepo,
    session: DBSession,
) -> AccountResponse:
    account = await UpdateProfileCommand(accounts).execute(
        context.account_id,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        date_of_birth=request.date_of_birth,
        avatar_url=request.avatar_url,
    )
    await session.commit()
    return AccountResponse.from_account(account)


@router.get(
    "/profile",
    summary="Get the current account's profile and groups",
    responses=_UNAUTHORIZED,
)
async def get_profile(
    context: CurrentAuth,
    groups: GroupProvisionerDep,
) -> ProfileResponse:
    memberships = await groups.memberships(context.account_id)
    response = ProfileResponse.from_account(context.account)
    response.groups = [GroupMembershipResponse.from_membership(m) for m in memberships]
    return response


@router.post(
    "/onboarding/complete",
    summary="Mark the current account's onboarding as finished",
    responses=_UNAUTHORIZED,
)
async def complete_onboarding(
    context: CurrentAuth,
    accounts: AccountRepo,
    session: DBSession,
) -> AccountResponse:
    account = await CompleteOnboardingCommand(accounts).execute(context.account_id)
    await session.commit()
    return AccountResponse.from_account(account)
