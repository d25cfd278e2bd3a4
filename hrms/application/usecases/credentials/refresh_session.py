"""
===============================================================================
USE CASE: Refresh Session
===============================================================================

Business Goal:
    Canjear un refresh token vigente por un access token nuevo.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RefreshSessionUseCase

Responsibilities:
    - Verificar firma/tipo/expiración del JWT (stateless).
    - Exigir que el registro exista y no esté vencido (stateful).
    - Emitir SOLO un access token (el refresh no rota).

Collaborators:
    - identity.tokens.TokenCodec
    - RefreshTokenRepository.get_refresh_token

Error Mapping:
    - UNAUTHORIZED "Invalid refresh token": firma/formato/expiración JWT
    - UNAUTHORIZED "Refresh token expired or invalid": sin registro o vencido
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ....domain.repositories import RefreshTokenRepository
from ....identity.tokens import InvalidTokenError, TokenCodec, utcnow
from .credential_results import AccessTokenResult, CredentialErrorCode, error_of


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str | None


class RefreshSessionUseCase:
    def __init__(
        self,
        codec: TokenCodec,
        refresh_tokens: RefreshTokenRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._codec = codec
        self._refresh_tokens = refresh_tokens
        self._clock = clock

    def execute(self, input_data: RefreshSessionInput) -> AccessTokenResult:
        token = input_data.refresh_token or ""

        try:
            user_id = self._codec.verify_refresh(token)
        except InvalidTokenError:
            return AccessTokenResult(
                error=error_of(
                    CredentialErrorCode.UNAUTHORIZED, "Invalid refresh token"
                )
            )

        record = self._refresh_tokens.get_refresh_token(token)
        if record is None or record.is_expired(self._clock()):
            return AccessTokenResult(
                error=error_of(
                    CredentialErrorCode.UNAUTHORIZED,
                    "Refresh token expired or invalid",
                )
            )

        return AccessTokenResult(access_token=self._codec.issue_access(user_id).token)
