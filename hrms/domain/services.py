"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato de notificación de credenciales (email).
    - Proteger a application de detalles del transporte (SMTP, logs, fakes).

Colaboradores:
    - infrastructure/notifications/*: implementaciones concretas.
    - application/usecases: send_credentials, request_password_reset.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Las implementaciones pueden lanzar NotificationError; los casos de uso
      lo loguean y NO lo propagan al cliente.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol


class CredentialNotifier(Protocol):
    """Contrato para avisar al usuario sus credenciales / link de reset."""

    def send_credential_email(
        self,
        email: str,
        login_id: str,
        message: str,
        first_name: str,
        reset_token: str,
    ) -> None:
        """Email de credenciales: login ID + link para fijar password."""
        ...

    def send_password_reset_email(
        self, email: str, first_name: str, reset_token: str
    ) -> None:
        """Email de "olvidé mi contraseña" con el link de reset."""
        ...
