"""
===============================================================================
USE CASE: Request Password Reset ("forgot password")
===============================================================================

Class:
    RequestPasswordResetUseCase

Responsibilities:
    - Emitir un token de reset de 1 hora si el email existe.
    - Enviar el link por email (best-effort).
    - Responder SIEMPRE igual: no revela si el email está registrado.

Collaborators:
    - UserRepository.get_user_by_email
    - PasswordResetTokenRepository.create_reset_token
    - domain.services.CredentialNotifier.send_password_reset_email
===============================================================================
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from ....crosscutting.logger import logger
from ....domain.entities import PasswordResetToken
from ....domain.repositories import PasswordResetTokenRepository, UserRepository
from ....domain.services import CredentialNotifier
from ....identity.tokens import utcnow
from .credential_results import CredentialActionResult, CredentialErrorCode, error_of

RESET_REQUESTED_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent"
)


def new_reset_token() -> str:
    """32 bytes aleatorios en hex (64 caracteres)."""
    return secrets.token_hex(32)


@dataclass(frozen=True)
class RequestPasswordResetInput:
    email: str


class RequestPasswordResetUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: PasswordResetTokenRepository,
        notifier: CredentialNotifier,
        token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._notifier = notifier
        self._token_ttl = token_ttl
        self._clock = clock

    def execute(self, input_data: RequestPasswordResetInput) -> CredentialActionResult:
        email = (input_data.email or "").strip()
        if not email:
            return CredentialActionResult(
                error=error_of(CredentialErrorCode.VALIDATION_ERROR, "Email is required")
            )

        user = self._users.get_user_by_email(email)
        if user is None:
            return CredentialActionResult(message=RESET_REQUESTED_MESSAGE)

        now = self._clock()
        token = new_reset_token()
        self._reset_tokens.create_reset_token(
            PasswordResetToken(
                token=token,
                user_id=user.id,
                email=user.email,
                expires_at=now + self._token_ttl,
                created_at=now,
            )
        )

        try:
            self._notifier.send_password_reset_email(user.email, user.first_name, token)
        except Exception as exc:
            logger.error(
                "No se pudo enviar el email de reset",
                extra={"user_id": str(user.id), "error": str(exc)},
            )

        return CredentialActionResult(message=RESET_REQUESTED_MESSAGE)
