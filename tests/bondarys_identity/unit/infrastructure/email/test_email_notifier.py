"""Unit tests for EmailNotifier."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from bondarys_config.settings import Settings
from bondarys_identity.infrastructure.email import EmailNotifier

SMTP_PATH = "bondarys_identity.infrastructure.email.email_notifier.smtplib.SMTP"


def _settings(**overrides) -> Settings:
    values = {
        "smtp_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": SecretStr("mail-password"),
        "smtp_from_email": "noreply@example.com",
        "smtp_use_tls": True,
        "smtp_starttls": True,
    }
    values.update(overrides)
    return Settings(**values)


class TestEmailNotifier:
    @pytest.mark.asyncio
    async def test_unknown_template(self):
        notifier = EmailNotifier(_settings())

        with pytest.raises(ValueError):
            await notifier.send("newsletter", "alice@example.com", {})

    @pytest.mark.asyncio
    async def test_disabled_smtp_sends_nothing(self):
        notifier = EmailNotifier(_settings(smtp_enabled=False))

        with patch(SMTP_PATH) as smtp:
            await notifier.send("login-otp", "alice@example.com", {"code": "123456"})

        smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_login_code_with_starttls(self):
        # Arrange
        notifier = EmailNotifier(_settings())
        server = MagicMock()

        # Act
        with patch(SMTP_PATH) as smtp:
            smtp.return_value.__enter__.return_value = server
            await notifier.send("login-otp", "alice@example.com", {"code": "042137"})

        # Assert
        smtp.assert_called_once_with("smtp.example.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "mail-password")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "alice@example.com"
        assert message["Subject"] == "Your sign-in code - Bondarys"
        assert "042137" in message.get_payload()[0].get_payload()

    @pytest.mark.asyncio
    async def test_delivery_failure_propagates(self):
        notifier = EmailNotifier(_settings())

        with patch(SMTP_PATH, side_effect=OSError("connection refused")):
            with pytest.raises(OSError):
                await notifier.send(
                    "password-reset",
                    "alice@example.com",
                    {"reset_link": "http://localhost:3000/reset-password?token=t"},
                )
