"""
===============================================================================
USE CASE: Login
===============================================================================

Business Goal:
    Autenticar con login ID (employee_id) o email + password y abrir una
    sesión nueva (access + refresh).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    LoginUseCase

Responsibilities:
    - Validar presencia de identificador y password.
    - Resolver usuario por email O employee_id.
    - Verificar password (Argon2).
    - Emitir y persistir el par de tokens.

Collaborators:
    - UserRepository.get_user_by_login_id
    - CompanyRepository.get_company_by_id (perfil con empresa)
    - identity.passwords.verify_password
    - SessionTokenIssuer

Error Mapping:
    - VALIDATION_ERROR: identificador o password vacíos
    - UNAUTHORIZED: usuario inexistente o password incorrecto (MISMO mensaje)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.logger import logger
from ....domain.repositories import CompanyRepository, UserRepository
from ....identity.passwords import verify_password
from .credential_results import AuthSessionResult, CredentialErrorCode, error_of
from .session_tokens import SessionTokenIssuer

INVALID_CREDENTIALS_MESSAGE = "Invalid login ID or password"


@dataclass(frozen=True)
class LoginInput:
    login_id: str
    password: str


class LoginUseCase:
    def __init__(
        self,
        users: UserRepository,
        companies: CompanyRepository,
        sessions: SessionTokenIssuer,
    ) -> None:
        self._users = users
        self._companies = companies
        self._sessions = sessions

    def execute(self, input_data: LoginInput) -> AuthSessionResult:
        login_id = (input_data.login_id or "").strip()
        if not login_id or not input_data.password:
            return AuthSessionResult(
                error=error_of(
                    CredentialErrorCode.VALIDATION_ERROR,
                    "Login ID and password are required",
                )
            )

        user = self._users.get_user_by_login_id(login_id)
        if user is None or not verify_password(input_data.password, user.password_hash):
            logger.info("Login rechazado", extra={"login_id": login_id})
            return AuthSessionResult(
                error=error_of(
                    CredentialErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE
                )
            )

        tokens = self._sessions.issue(user.id)
        company = (
            self._companies.get_company_by_id(user.company_id)
            if user.company_id
            else None
        )

        logger.info("Login exitoso", extra={"user_id": str(user.id)})
        return AuthSessionResult(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=user,
            company=company,
        )
