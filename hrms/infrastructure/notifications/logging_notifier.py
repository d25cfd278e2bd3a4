"""
===============================================================================
TARJETA CRC — infrastructure/notifications/logging_notifier.py
===============================================================================

Componente:
  LoggingEmailNotifier (CredentialNotifier sin envío real)

Responsabilidades:
  - Registrar en logs que un email se hubiera enviado (dev / email_enabled=False).
  - NO loguear el token de reset: sólo destinatario y tipo.

Colaboradores:
  - crosscutting.logger
  - container.py (lo elige cuando email_enabled es False)
===============================================================================
"""

from __future__ import annotations

from ...crosscutting.logger import logger


class LoggingEmailNotifier:
    def send_credential_email(
        self,
        email: str,
        login_id: str,
        message: str,
        first_name: str,
        reset_token: str,
    ) -> None:
        logger.info(
            "Email deshabilitado: credenciales no enviadas",
            extra={"email_kind": "credentials", "to": email, "login_id": login_id},
        )

    def send_password_reset_email(
        self, email: str, first_name: str, reset_token: str
    ) -> None:
        logger.info(
            "Email deshabilitado: reset no enviado",
            extra={"email_kind": "password_reset", "to": email},
        )
