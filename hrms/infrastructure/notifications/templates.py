"""
===============================================================================
TARJETA CRC — infrastructure/notifications/templates.py
===============================================================================

Responsabilidades:
  - Construir el link de reset: {frontend_url}/reset-password?token=..&email=..
  - Construir asunto + cuerpo texto + HTML mínimo de cada email.

Colaboradores:
  - smtp_notifier.SmtpEmailNotifier
  - logging_notifier.LoggingEmailNotifier (sólo usa el link)

Notas:
  - Todo valor de usuario va escapado en el HTML (html.escape).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from urllib.parse import urlencode

CREDENTIALS_SUBJECT = "Welcome to WorkZen HRMS - Your Account Credentials"
PASSWORD_RESET_SUBJECT = "WorkZen HRMS - Password Reset Request"


@dataclass(frozen=True, slots=True)
class EmailContent:
    subject: str
    text: str
    html: str


def build_reset_link(frontend_url: str, reset_token: str, email: str) -> str:
    query = urlencode({"token": reset_token, "email": email})
    return f"{frontend_url.rstrip('/')}/reset-password?{query}"


def credentials_email(
    *, email: str, login_id: str, message: str, first_name: str, reset_link: str
) -> EmailContent:
    text = "\n".join(
        [
            "Welcome to WorkZen HRMS!",
            "",
            f"Hello {first_name},",
            "",
            message,
            "",
            f"Your Login ID: {login_id}",
            f"You can also login using your email address: {email}",
            "",
            f"Set your password: {reset_link}",
            "",
            "This link expires in 1 hour.",
            "If you did not expect this email, please contact your administrator.",
        ]
    )
    html = (
        "<p>Hello {name},</p>"
        "<p>{message}</p>"
        "<p><strong>Your Login ID:</strong> {login_id}<br>"
        "You can also login using your email address: {email}</p>"
        '<p><a href="{link}">Set your password</a> (expires in 1 hour)</p>'
    ).format(
        name=escape(first_name),
        message=escape(message),
        login_id=escape(login_id),
        email=escape(email),
        link=escape(reset_link, quote=True),
    )
    return EmailContent(subject=CREDENTIALS_SUBJECT, text=text, html=html)


def password_reset_email(*, first_name: str, reset_link: str) -> EmailContent:
    text = "\n".join(
        [
            f"Hello {first_name},",
            "",
            "We received a request to reset your WorkZen HRMS password.",
            f"Reset your password: {reset_link}",
            "",
            "This link expires in 1 hour.",
            "If you did not request a password reset, you can ignore this email.",
        ]
    )
    html = (
        "<p>Hello {name},</p>"
        "<p>We received a request to reset your WorkZen HRMS password.</p>"
        '<p><a href="{link}">Reset your password</a> (expires in 1 hour)</p>'
        "<p>If you did not request a password reset, you can ignore this email.</p>"
    ).format(name=escape(first_name), link=escape(reset_link, quote=True))
    return EmailContent(subject=PASSWORD_RESET_SUBJECT, text=text, html=html)
