"""
===============================================================================
USE CASE: Logout
===============================================================================

Class:
    LogoutUseCase

Responsibilities:
    - Revocar el refresh token presentado (borra su registro).
    - Ser idempotente: sin token o sin registro => éxito igual.

Collaborators:
    - RefreshTokenRepository.delete_refresh_token
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.logger import logger
from ....domain.repositories import RefreshTokenRepository
from .credential_results import CredentialActionResult


@dataclass(frozen=True)
class LogoutInput:
    refresh_token: str | None = None


class LogoutUseCase:
    def __init__(self, refresh_tokens: RefreshTokenRepository) -> None:
        self._refresh_tokens = refresh_tokens

    def execute(self, input_data: LogoutInput) -> CredentialActionResult:
        token = (input_data.refresh_token or "").strip()
        if token:
            deleted = self._refresh_tokens.delete_refresh_token(token)
            logger.info("Logout", extra={"session_revoked": deleted})

        return CredentialActionResult(message="Logged out successfully")
