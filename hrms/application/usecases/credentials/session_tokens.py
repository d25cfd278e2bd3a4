"""
===============================================================================
SESSION TOKENS (helper compartido por login y registro)
===============================================================================

Responsibilities:
    - Emitir el par access + refresh para un usuario.
    - Persistir el refresh token (multi-device: un registro por sesión).

Collaborators:
    - identity.tokens.TokenCodec
    - domain.repositories.RefreshTokenRepository
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID

from ....domain.entities import RefreshToken
from ....domain.repositories import RefreshTokenRepository
from ....identity.tokens import TokenCodec, utcnow


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str


class SessionTokenIssuer:
    def __init__(
        self,
        codec: TokenCodec,
        refresh_tokens: RefreshTokenRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._codec = codec
        self._refresh_tokens = refresh_tokens
        self._clock = clock

    def issue(self, user_id: UUID) -> SessionTokens:
        access = self._codec.issue_access(user_id)
        refresh = self._codec.issue_refresh(user_id)

        now = self._clock()
        self._refresh_tokens.create_refresh_token(
            RefreshToken(
                token=refresh.token,
                user_id=user_id,
                expires_at=now + self._codec.refresh_ttl,
                created_at=now,
            )
        )
        return SessionTokens(access_token=access.token, refresh_token=refresh.token)
