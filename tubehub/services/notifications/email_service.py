"""
TubeHub outbound mail - verification and password-reset messages over SMTP.

Sending happens inside a Celery task, never on the request path.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from tubehub.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    html: str


class EmailService:

    def send(self, message: OutgoingEmail) -> None:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = settings.mail_from
        msg["To"] = message.to
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(message.html, subtype="html")

        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password or "")
            smtp.send_message(msg)
        logger.info(f"Mail sent to {message.to}: {message.subject}")

    # ── Templates ────────────────────────────────────────────────────────

    @staticmethod
    def verification_email(to: str, full_name: str, token: str) -> OutgoingEmail:
        link = f"{settings.frontend_url.rstrip('/')}/verify-email?token={token}"
        return OutgoingEmail(
            to=to,
            subject="Verify Email",
            html=(
                f"<p>Hey {full_name}</p>"
                f"<p>Verify your email to continue using our services "
                f'<a href="{link}">Verify Email</a></p>'
                f"<p>{token}</p>"
                f"<p>Thank you</p>"
            ),
        )

    @staticmethod
    def password_reset_email(to: str, full_name: str, token: str) -> OutgoingEmail:
        link = f"{settings.frontend_url.rstrip('/')}/reset-password?token={token}"
        minutes = settings.password_reset_token_expire_minutes
        return OutgoingEmail(
            to=to,
            subject="Reset Password",
            html=(
                f"<p>Hey {full_name}</p>"
                f'<p>Use this link to choose a new password: <a href="{link}">Reset Password</a></p>'
                f"<p>The link expires in {minutes} minutes. "
                f"If you did not ask for a reset you can ignore this email.</p>"
            ),
        )


email_service = EmailService()
