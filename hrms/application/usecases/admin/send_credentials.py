"""
===============================================================================
USE CASE: Send Credentials (admin)
===============================================================================

Name:
    Send Credentials Use Case

Business Goal:
    Que un admin le envíe a un usuario su login ID y un link para fijar
    password, sin que el admin vea ni elija la password.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    SendCredentialsUseCase

Responsibilities:
    - Validar actor admin y alcance por empresa.
    - Emitir un PasswordResetToken de 1 hora.
    - Despachar el email (best-effort: una falla se loguea, no se propaga).

Collaborators:
    - UserRepository.get_user_by_id
    - PasswordResetTokenRepository.create_reset_token
    - domain.services.CredentialNotifier.send_credential_email
    - domain.tenant_policy

Error Mapping:
    - FORBIDDEN: actor no admin / usuario de otra empresa
    - NOT_FOUND: usuario inexistente
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import PasswordResetToken
from ....domain.repositories import PasswordResetTokenRepository, UserRepository
from ....domain.services import CredentialNotifier
from ....domain.tenant_policy import AdminActor, can_manage_user, is_admin
from ....identity.tokens import utcnow
from ..credentials.credential_results import (
    CredentialActionResult,
    CredentialErrorCode,
    error_of,
)
from ..credentials.request_password_reset import new_reset_token

CREDENTIALS_EMAIL_MESSAGE = (
    "Your password has been reset. Please use the link below to set a new password."
)


@dataclass(frozen=True)
class SendCredentialsInput:
    target_user_id: UUID
    actor: AdminActor | None


class SendCredentialsUseCase:
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

    def execute(self, input_data: SendCredentialsInput) -> CredentialActionResult:
        actor = input_data.actor
        if not is_admin(actor):
            return self._error(CredentialErrorCode.FORBIDDEN, "Admin access required")

        user = self._users.get_user_by_id(input_data.target_user_id)
        if user is None:
            return self._error(CredentialErrorCode.NOT_FOUND, "User not found")

        if not can_manage_user(actor, user):
            return self._error(
                CredentialErrorCode.FORBIDDEN,
                "You can only send credentials to users in your company",
            )

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
            self._notifier.send_credential_email(
                user.email,
                user.login_id,
                CREDENTIALS_EMAIL_MESSAGE,
                user.first_name,
                token,
            )
        except Exception as exc:
            logger.error(
                "No se pudo enviar el email de credenciales",
                extra={"target_user_id": str(user.id), "error": str(exc)},
            )

        logger.info(
            "Credenciales enviadas",
            extra={"target_user_id": str(user.id), "actor_id": str(actor.user_id)},
        )
        return CredentialActionResult(
            message="Login credentials sent successfully via email"
        )

    @staticmethod
    def _error(code: CredentialErrorCode, message: str) -> CredentialActionResult:
        return CredentialActionResult(error=error_of(code, message))
