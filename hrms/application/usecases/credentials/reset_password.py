"""
===============================================================================
USE CASE: Reset Password (consumo del link de email)
===============================================================================

Business Goal:
    Permitir fijar una password nueva con el token recibido por email
    (credenciales enviadas por un admin o "olvidé mi contraseña").

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ResetPasswordUseCase

Responsibilities:
    - Validar longitud de password.
    - Validar token: existe, no vencido, email coincide con el snapshot.
    - Sobrescribir el hash, consumir el token (uso único) y cerrar todas
      las sesiones del usuario.

Collaborators:
    - PasswordResetTokenRepository: get/delete
    - UserRepository.update_user_password
    - RefreshTokenRepository.delete_user_refresh_tokens

Error Mapping:
    - VALIDATION_ERROR: password corto / token vacío
    - UNAUTHORIZED: token desconocido, vencido o de otro email
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ....crosscutting.logger import logger
from ....domain.repositories import (
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    UserRepository,
)
from ....identity.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    is_password_long_enough,
)
from ....identity.tokens import utcnow
from ....identity.users import normalize_email
from .credential_results import CredentialActionResult, CredentialErrorCode, error_of

INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset token"


@dataclass(frozen=True)
class ResetPasswordInput:
    token: str
    new_password: str
    email: str | None = None


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: PasswordResetTokenRepository,
        refresh_tokens: RefreshTokenRepository,
        min_password_length: int = MIN_PASSWORD_LENGTH,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._refresh_tokens = refresh_tokens
        self._min_password_length = min_password_length
        self._clock = clock

    def execute(self, input_data: ResetPasswordInput) -> CredentialActionResult:
        if not is_password_long_enough(
            input_data.new_password, self._min_password_length
        ):
            return self._error(
                CredentialErrorCode.VALIDATION_ERROR,
                f"Password must be at least {self._min_password_length} characters long",
            )

        token = (input_data.token or "").strip()
        if not token:
            return self._error(
                CredentialErrorCode.VALIDATION_ERROR, "Reset token is required"
            )

        record = self._reset_tokens.get_reset_token(token)
        if record is None or record.is_expired(self._clock()):
            return self._error(
                CredentialErrorCode.UNAUTHORIZED, INVALID_RESET_TOKEN_MESSAGE
            )

        email = normalize_email(input_data.email)
        if email and email != normalize_email(record.email):
            return self._error(
                CredentialErrorCode.UNAUTHORIZED, INVALID_RESET_TOKEN_MESSAGE
            )

        updated = self._users.update_user_password(
            record.user_id, hash_password(input_data.new_password)
        )
        if not updated:
            return self._error(
                CredentialErrorCode.UNAUTHORIZED, INVALID_RESET_TOKEN_MESSAGE
            )

        self._reset_tokens.delete_reset_token(token)
        revoked = self._refresh_tokens.delete_user_refresh_tokens(record.user_id)

        logger.info(
            "Password restablecida",
            extra={"user_id": str(record.user_id), "sessions_revoked": revoked},
        )
        return CredentialActionResult(message="Password has been reset successfully")

    @staticmethod
    def _error(code: CredentialErrorCode, message: str) -> CredentialActionResult:
        return CredentialActionResult(error=error_of(code, message))
