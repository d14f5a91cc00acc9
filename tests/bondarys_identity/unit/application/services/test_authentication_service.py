"""Unit tests for CredentialVerifier and AuthenticationService."""

from dataclasses import replace
from unittest.mock import AsyncMock, Mock

import pytest

from bondarys_auth import (
    AccountNotFoundError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    PasswordHashingService,
    TokenPair,
)
from bondarys_identity.application.services import (
    AuthenticationService,
    CredentialVerifier,
    TokenService,
)
from bondarys_identity.domain.account import (
    AccountIdentifier,
    ChangePassword,
    RecordLogin,
)
from tests.shared.fixtures.factories import TestAccountFactory

TEST_PASSWORD = "Secret123!"


class TestCredentialVerifier:
    """Tests for credential verification."""

    def setup_method(self):
        self.account_repo = AsyncMock()
        self.password_service = Mock(spec=PasswordHashingService)
        self.verifier = CredentialVerifier(self.account_repo, self.password_service)

    @pytest.mark.asyncio
    async def test_valid_credentials(self):
        alice = TestAccountFactory.alice()
        self.account_repo.find_by_email.return_value = alice
        self.password_service.verify.return_value = True

        account = await self.verifier.verify(alice.email, TEST_PASSWORD)

        assert account == alice
        self.password_service.verify.assert_called_once_with(
            TEST_PASSWORD,
            alice.password_hash,
        )

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        self.account_repo.find_by_email.return_value = None

        with pytest.raises(InvalidCredentialsError):
            await self.verifier.verify("nobody@example.com", TEST_PASSWORD)

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        self.account_repo.find_by_email.return_value = TestAccountFactory.alice()
        self.password_service.verify.return_value = False

        with pytest.raises(InvalidCredentialsError):
            await self.verifier.verify(TestAccountFactory.ALICE_EMAIL, "wrong")

    @pytest.mark.asyncio
    async def test_account_without_password(self):
        """Test that SSO-only accounts cannot log in with a password."""
        self.account_repo.find_by_email.return_value = TestAccountFactory.alice(
            password_hash=None,
        )

        with pytest.raises(InvalidCredentialsError):
            await self.verifier.verify(TestAccountFactory.ALICE_EMAIL, TEST_PASSWORD)

        self.password_service.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_placeholder_is_invalid_credentials(self):
        """Test that a placeholder fails exactly like an unknown account."""
        self.account_repo.find_by_email.return_value = TestAccountFactory.alice(
            is_active=False,
        )
        self.password_service.verify.return_value = True

        with pytest.raises(InvalidCredentialsError):
            await self.verifier.verify(TestAccountFactory.ALICE_EMAIL, TEST_PASSWORD)

    @pytest.mark.asyncio
    async def test_unverified_email_after_correct_password(self):
        self.account_repo.find_by_email.return_value = TestAccountFactory.alice(
            is_email_verified=False,
        )
        self.password_service.verify.return_value = True

        with pytest.raises(EmailNotVerifiedError):
            await self.verifier.verify(TestAccountFactory.ALICE_EMAIL, TEST_PASSWORD)

    @pytest.mark.asyncio
    async def test_unverified_email_with_wrong_password(self):
        """Test that the password is checked before the verification state."""
        self.account_repo.find_by_email.return_value = TestAccountFactory.alice(
            is_email_verified=False,
        )
        self.password_service.verify.return_value = False

        with pytest.raises(InvalidCredentialsError):
            await self.verifier.verify(TestAccountFactory.ALICE_EMAIL, "wrong")


class TestAuthenticationService:
    """Tests for login, refresh, logout and password changes."""

    def setup_method(self):
        self.account_repo = AsyncMock()
        self.verifier = AsyncMock(spec=CredentialVerifier)
        self.password_service = Mock(spec=PasswordHashingService)
        self.token_service = AsyncMock(spec=TokenService)
        self.tokens = TokenPair("access", "refresh", 900)
        self.token_service.issue_pair.return_value = self.tokens

        self.service = AuthenticationService(
            account_repository=self.account_repo,
            credential_verifier=self.verifier,
            password_service=self.password_service,
            token_service=self.token_service,
        )

    @pytest.mark.asyncio
    async def test_login_records_login_and_issues_tokens(self):
        # Arrange
        alice = TestAccountFactory.alice()
        self.verifier.verify.return_value = alice
        self.account_repo.save.side_effect = lambda change: alice

        # Act
        account, tokens = await self.service.login(alice.email, TEST_PASSWORD)

        # Assert
        assert account == alice
        assert tokens == self.tokens
        change = self.account_repo.save.call_args.args[0]
        assert isinstance(change, RecordLogin)
        assert change.account_id == alice.id
        self.token_service.issue_pair.assert_awaited_once_with(alice)

    @pytest.mark.asyncio
    async def test_login_failure_issues_nothing(self):
        self.verifier.verify.side_effect = InvalidCredentialsError()

        with pytest.raises(InvalidCredentialsError):
            await self.service.login("alice@example.com", "wrong")

        self.account_repo.save.assert_not_called()
        self.token_service.issue_pair.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_delegates_to_rotation(self):
        self.token_service.rotate.return_value = (TestAccountFactory.alice(), self.tokens)

        tokens = await self.service.refresh("refresh-token")

        assert tokens == self.tokens
        self.token_service.rotate.assert_awaited_once_with("refresh-token")

    @pytest.mark.asyncio
    async def test_logout_revokes_token(self):
        alice = TestAccountFactory.alice()

        await self.service.logout(alice.id, "refresh-token")

        self.token_service.revoke.assert_awaited_once_with(alice.id, "refresh-token")

    @pytest.mark.asyncio
    async def test_check_user(self):
        identifier = AccountIdentifier.from_input(email="bob@example.com")
        self.account_repo.exists_active.return_value = False

        assert await self.service.check_user(identifier) is False
        self.account_repo.exists_active.assert_awaited_once_with(identifier)

    @pytest.mark.asyncio
    async def test_change_password(self):
        alice = TestAccountFactory.alice()
        self.account_repo.find_by_id.return_value = alice
        self.password_service.verify.return_value = True
        self.password_service.hash.return_value = "new-hash"

        await self.service.change_password(alice.id, TEST_PASSWORD, "NewSecret456!")

        self.account_repo.save.assert_awaited_once_with(ChangePassword(alice.id, "new-hash"))

    @pytest.mark.asyncio
    async def test_change_password_wrong_current_password(self):
        alice = TestAccountFactory.alice()
        self.account_repo.find_by_id.return_value = alice
        self.password_service.verify.return_value = False

        with pytest.raises(InvalidCredentialsError):
            await self.service.change_password(alice.id, "wrong", "NewSecret456!")

        self.account_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_change_password_without_existing_password(self):
        alice = replace(TestAccountFactory.alice(), password_hash=None)
        self.account_repo.find_by_id.return_value = alice

        with pytest.raises(InvalidCredentialsError):
            await self.service.change_password(alice.id, "anything", "NewSecret456!")

    @pytest.mark.asyncio
    async def test_change_password_unknown_account(self):
        self.account_repo.find_by_id.return_value = None

        with pytest.raises(AccountNotFoundError):
            await self.service.change_password(
                TestAccountFactory.ALICE_ID,
                TEST_PASSWORD,
                "NewSecret456!",
            )
