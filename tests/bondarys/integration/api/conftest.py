"""Pytest fixtures for API integration tests.

Every test gets its own application on a fresh SQLite file. Outbound
email is captured by ``CapturingNotifier`` and SSO tokens are resolved by
a fake Google strategy, so no network access is needed.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bondarys.presentation.api.app import API_V1_PREFIX, create_app
from bondarys.presentation.api.dependencies import get_password_service
from bondarys_auth import InvalidProviderTokenError, PasswordHashingService
from bondarys_config.settings import Settings
from bondarys_identity.application.commands import ChangeAccountRoleCommand
from bondarys_identity.application.ports import Notifier
from bondarys_identity.domain.account import AccountRole, SsoProvider
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    create_engine_for,
)
from bondarys_identity.infrastructure.sso import (
    ExternalIdentity,
    SsoResolver,
    SsoStrategy,
)

TEST_PASSWORD = "SecurePassword123!"


class CapturingNotifier(Notifier):
    """Keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []

    async def send(self, template: str, to: str, data: Mapping[str, Any]) -> None:
        self.sent.append((template, to, dict(data)))

    def last(self, template: str, to: str) -> dict[str, Any]:
        """Data of the most recent ``template`` message sent to ``to``."""
        for sent_template, sent_to, data in reversed(self.sent):
            if sent_template == template and sent_to == to:
                return data
        msg = f"No {template} message sent to {to}"
        raise AssertionError(msg)


class FakeGoogleStrategy(SsoStrategy):
    """Resolves tokens from a fixed table."""

    def __init__(self) -> None:
        self.identities: dict[str, ExternalIdentity] = {}

    async def resolve(self, provider_token: str) -> ExternalIdentity:
        identity = self.identities.get(provider_token)
        if identity is None:
            raise InvalidProviderTokenError
        return identity

    def register(self, token: str, subject: str, email: str | None, **profile) -> None:
        profile.setdefault("email_verified", email is not None)
        self.identities[token] = ExternalIdentity(
            provider=SsoProvider.GOOGLE,
            subject=subject,
            email=email,
            **profile,
        )


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def database_dsn(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"


@pytest.fixture
def api_settings(database_dsn) -> Settings:
    """Test API settings with debug enabled."""
    return Settings(
        environment="test",
        database_dsn=database_dsn,
        jwt_secret=SecretStr("test-jwt-secret-for-testing-only"),
        jwt_refresh_secret=SecretStr("test-jwt-refresh-secret-for-testing-only"),
        api_debug=True,
        smtp_enabled=False,
        frontend_base_url="http://localhost:3000",
    )


@pytest.fixture
def notifier() -> CapturingNotifier:
    return CapturingNotifier()


@pytest.fixture
def google() -> FakeGoogleStrategy:
    return FakeGoogleStrategy()


@pytest.fixture
def test_client(api_settings, notifier, google):
    """Create a test client; entering it runs the lifespan (schema creation)."""
    app = create_app(settings=api_settings)
    app.state.notifier = notifier
    app.state.sso_resolver = SsoResolver({SsoProvider.GOOGLE: google})
    # Cheap hashes keep the suite fast
    app.dependency_overrides[get_password_service] = lambda: PasswordHashingService(rounds=4)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user_data() -> dict:
    return {
        "email": "carol@example.com",
        "password": TEST_PASSWORD,
        "firstName": "Carol",
        "lastName": "Smith",
    }


@pytest.fixture
def registered_user(test_client, registered_user_data, api_v1_prefix) -> dict:
    """Register the default user and return the response body."""
    response = test_client.post(f"{api_v1_prefix}/auth/register", json=registered_user_data)
    assert response.status_code == 201, (
        f"Registration failed: {response.status_code} - {response.text}"
    )
    return response.json()


@pytest.fixture
def auth_headers(registered_user) -> dict:
    """Get auth headers for the registered user."""
    return {"Authorization": f"Bearer {registered_user['accessToken']}"}


def bearer(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


def grant_admin(database_dsn: str, email: str) -> None:
    """Give ``email`` the admin role directly in the database.

    Runs in a fresh event loop, separate from the TestClient's.
    """

    async def _grant() -> None:
        engine = create_engine_for(database_dsn)
        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with session_maker() as session:
                await ChangeAccountRoleCommand(AccountRepositorySQLAlchemy(session)).execute(
                    email,
                    AccountRole.ADMIN,
                )
                await session.commit()
        finally:
            await engine.dispose()

    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(_grant())
    finally:
        loop.close()
