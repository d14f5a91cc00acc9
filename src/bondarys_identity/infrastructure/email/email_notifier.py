import asyncio
import logging
import smtplib
import ssl
from collections.abc import Mapping
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from bondarys_config.settings import Settings
from bondarys_identity.application.ports import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    text: str
    html: str


_HTML_WRAPPER = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        {body}
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">If you didn't request this, you can safely ignore this email.</p>
            <p style="color: #9ca3af; font-size: 13px; margin-top: 8px;">{app_name}</p>
        </div>
    </div>
</body>
</html>
"""

_CODE_BLOCK = (
    '<p style="margin: 30px 0; text-align: center; font-size: 32px; '
    'letter-spacing: 8px; font-weight: 600; color: #111827;">{code}</p>'
)

TEMPLATES: dict[str, EmailTemplate] = {
    "email-verification": EmailTemplate(
        subject="Verify your email - {app_name}",
        text=(
            "Hello {first_name},\n\n"
            "Your {app_name} verification code is: {code}\n\n"
            "The code is valid for 10 minutes.\n\n-- {app_name}\n"
        ),
        html=(
            '<h2 style="color: #111827; margin-top: 0;">Verify your email</h2>'
            '<p style="color: #374151;">Hello {first_name}, enter this code to '
            "verify your email address. It is valid for 10 minutes.</p>" + _CODE_BLOCK
        ),
    ),
    "login-otp": EmailTemplate(
        subject="Your sign-in code - {app_name}",
        text=(
            "Hello,\n\n"
            "Your {app_name} sign-in code is: {code}\n\n"
            "The code is valid for 10 minutes.\n\n-- {app_name}\n"
        ),
        html=(
            '<h2 style="color: #111827; margin-top: 0;">Your sign-in code</h2>'
            '<p style="color: #374151;">Enter this code to sign in. '
            "It is valid for 10 minutes.</p>" + _CODE_BLOCK
        ),
    ),
    "password-reset": EmailTemplate(
        subject="Password Reset Request - {app_name}",
        text=(
            "Hello,\n\n"
            "You requested a password reset for your {app_name} account.\n\n"
            "Click the link below to reset your password (valid for 1 hour):\n"
            "{reset_link}\n\n-- {app_name}\n"
        ),
        html=(
            '<h2 style="color: #111827; margin-top: 0;">Password Reset Request</h2>'
            '<p style="color: #374151;">Click the button below to reset your '
            "password. This link is valid for 1 hour.</p>"
            '<p style="margin: 30px 0; text-align: center;"><a href="{reset_link}" '
            'style="display: inline-block; padding: 14px 28px; '
            "background-color: #2563eb; color: #ffffff !important; "
            'text-decoration: none; border-radius: 6px;">Reset Password</a></p>'
        ),
    ),
}


class EmailNotifier(Notifier):
    """Notifier delivering templated emails over SMTP.

    ``smtplib`` is blocking, so delivery runs in a worker thread.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    async def send(self, template: str, to: str, data: Mapping[str, Any]) -> None:
        if template not in TEMPLATES:
            msg = f"Unknown email template: {template}"
            raise ValueError(msg)

        if not self._settings.smtp_enabled:
            logger.warning("SMTP disabled, skipping %s email to %s", template, to)
            return

        message = self._render(template, to, data)
        await asyncio.to_thread(self._send_email, to, message)

    def _render(self, template: str, to: str, data: Mapping[str, Any]) -> MIMEMultipart:
        template_spec = TEMPLATES[template]
        context = {"app_name": self._settings.app_name, "first_name": "", **data}
        body_html = template_spec.html.format(**context)
        return self._create_message(
            to_email=to,
            subject=template_spec.subject.format(**context),
            text_body=template_spec.text.format(**context),
            html_body=_HTML_WRAPPER.format(body=body_html, app_name=context["app_name"]),
        )

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            return

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise
