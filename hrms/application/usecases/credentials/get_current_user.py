"""
===============================================================================
USE CASE: Get Current User
===============================================================================

Class:
    GetCurrentUserUseCase

Responsibilities:
    - Resolver el usuario dueño de un access token.
    - Adjuntar su empresa al perfil (si tiene).

Collaborators:
    - identity.tokens.TokenCodec.verify_access
    - UserRepository.get_user_by_id
    - CompanyRepository.get_company_by_id

Error Mapping:
    - UNAUTHORIZED: token ausente, inválido o vencido, o usuario borrado
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.repositories import CompanyRepository, UserRepository
from ....identity.tokens import InvalidTokenError, TokenCodec
from .credential_results import CredentialErrorCode, UserResult, error_of


@dataclass(frozen=True)
class GetCurrentUserInput:
    access_token: str | None


class GetCurrentUserUseCase:
    def __init__(
        self,
        codec: TokenCodec,
        users: UserRepository,
        companies: CompanyRepository,
    ) -> None:
        self._codec = codec
        self._users = users
        self._companies = companies

    def execute(self, input_data: GetCurrentUserInput) -> UserResult:
        if not input_data.access_token:
            return self._unauthorized("Access token required")

        try:
            user_id = self._codec.verify_access(input_data.access_token)
        except InvalidTokenError:
            return self._unauthorized("Invalid or expired token")

        user = self._users.get_user_by_id(user_id)
        if user is None:
            return self._unauthorized("User not found")

        company = (
            self._companies.get_company_by_id(user.company_id)
            if user.company_id
            else None
        )
        return UserResult(user=user, company=company)

    @staticmethod
    def _unauthorized(message: str) -> UserResult:
        return UserResult(error=error_of(CredentialErrorCode.UNAUTHORIZED, message))
