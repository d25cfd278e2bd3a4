"""
===============================================================================
TARJETA CRC — infrastructure/notifications/smtp_notifier.py
===============================================================================

Componente:
  SmtpEmailNotifier (implementación SMTP de CredentialNotifier)

Responsabilidades:
  - Armar el mensaje MIME (texto + HTML) con email.message.EmailMessage.
  - Enviar por SMTP con STARTTLS y login opcional.
  - Reintentar fallas transitorias (tenacity) y envolver el error final en
    NotificationError.

Colaboradores:
  - smtplib / email.message (stdlib)
  - infrastructure.services.retry.create_retry_decorator
  - infrastructure.notifications.templates
  - crosscutting.config.Settings (smtp_*, frontend_url)
===============================================================================
"""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Callable

from ...crosscutting.exceptions import NotificationError
from ...crosscutting.logger import logger
from ..services.retry import create_retry_decorator
from .templates import (
    EmailContent,
    build_reset_link,
    credentials_email,
    password_reset_email,
)


class SmtpEmailNotifier:
    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        from_name: str,
        frontend_url: str,
        use_tls: bool = True,
        timeout_seconds: float = 10.0,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
        retry_decorator: Callable | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from_name = from_name
        self._frontend_url = frontend_url
        self._use_tls = use_tls
        self._timeout = timeout_seconds
        self._smtp_factory = smtp_factory
        decorator = retry_decorator or create_retry_decorator()
        self._send_with_retry = decorator(self._deliver)

    @classmethod
    def from_settings(cls, settings) -> "SmtpEmailNotifier":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            from_name=settings.smtp_from_name,
            frontend_url=settings.frontend_url,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # CredentialNotifier
    # ------------------------------------------------------------------
    def send_credential_email(
        self,
        email: str,
        login_id: str,
        message: str,
        first_name: str,
        reset_token: str,
    ) -> None:
        content = credentials_email(
            email=email,
            login_id=login_id,
            message=message,
            first_name=first_name,
            reset_link=build_reset_link(self._frontend_url, reset_token, email),
        )
        self._send(email, content)

    def send_password_reset_email(
        self, email: str, first_name: str, reset_token: str
    ) -> None:
        content = password_reset_email(
            first_name=first_name,
            reset_link=build_reset_link(self._frontend_url, reset_token, email),
        )
        self._send(email, content)

    # ------------------------------------------------------------------
    # Transporte
    # ------------------------------------------------------------------
    def _build_message(self, to: str, content: EmailContent) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = content.subject
        msg["From"] = formataddr((self._from_name, self._username))
        msg["To"] = to
        msg.set_content(content.text)
        msg.add_alternative(content.html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with self._smtp_factory(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password)
            smtp.send_message(msg)

    def _send(self, to: str, content: EmailContent) -> None:
        msg = self._build_message(to, content)
        try:
            self._send_with_retry(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(
                f"Failed to send email: {exc}", original_error=exc
            ) from exc

        logger.info("Email enviado", extra={"subject": content.subject})
