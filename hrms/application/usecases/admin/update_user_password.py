"""
===============================================================================
USE CASE: Update User Password (admin)
===============================================================================

Class:
    UpdateUserPasswordUseCase

Responsibilities:
    - Validar longitud mínima ANTES de buscar al usuario.
    - Validar alcance por empresa del admin.
    - Sobrescribir el hash (no pide la password anterior).

Collaborators:
    - UserRepository: get_user_by_id(), update_user_password()
    - identity.passwords.hash_password
    - domain.tenant_policy

Error Mapping:
    - VALIDATION_ERROR: password < 8
    - NOT_FOUND: usuario inexistente
    - FORBIDDEN: actor no admin / usuario de otra empresa
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....domain.tenant_policy import AdminActor, can_manage_user, is_admin
from ....identity.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    is_password_long_enough,
)
from ..credentials.credential_results import (
    CredentialActionResult,
    CredentialErrorCode,
    error_of,
)


@dataclass(frozen=True)
class UpdateUserPasswordInput:
    target_user_id: UUID
    new_password: str
    actor: AdminActor | None


class UpdateUserPasswordUseCase:
    def __init__(
        self, users: UserRepository, min_password_length: int = MIN_PASSWORD_LENGTH
    ) -> None:
        self._users = users
        self._min_password_length = min_password_length

    def execute(self, input_data: UpdateUserPasswordInput) -> CredentialActionResult:
        actor = input_data.actor
        if not is_admin(actor):
            return self._error(CredentialErrorCode.FORBIDDEN, "Admin access required")

        if not is_password_long_enough(
            input_data.new_password, self._min_password_length
        ):
            return self._error(
                CredentialErrorCode.VALIDATION_ERROR,
                f"Password must be at least {self._min_password_length} characters long",
            )

        user = self._users.get_user_by_id(input_data.target_user_id)
        if user is None:
            return self._error(CredentialErrorCode.NOT_FOUND, "User not found")

        if not can_manage_user(actor, user):
            return self._error(
                CredentialErrorCode.FORBIDDEN,
                "You can only update passwords for users in your company",
            )

        self._users.update_user_password(user.id, hash_password(input_data.new_password))

        logger.info(
            "Password actualizada por admin",
            extra={"target_user_id": str(user.id), "actor_id": str(actor.user_id)},
        )
        return CredentialActionResult(message="Password updated successfully")

    @staticmethod
    def _error(code: CredentialErrorCode, message: str) -> CredentialActionResult:
        return CredentialActionResult(error=error_of(code, message))
