"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Codec de tokens JWT (access / refresh)

Responsabilidades:
    - Emitir access tokens (stateless, TTL corto).
    - Emitir refresh tokens (firmados con OTRO secreto, TTL largo).
    - Verificar firma, expiración, claims mínimos y tipo de token.

Colaboradores:
    - crosscutting.config.Settings: secretos y TTLs.
    - application/usecases/credentials/session_tokens.py: emite el par.
    - application/usecases/credentials/refresh_session.py / get_current_user.py

Decisiones:
    - HS256; claims: sub, typ, iat, exp, jti.
    - jti aleatorio: dos refresh tokens del mismo usuario en el mismo
      segundo nunca colisionan en la tabla refresh_tokens.
    - Toda falla de verificación => InvalidTokenError (un solo tipo).
===============================================================================
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_TYP: str = "typ"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_JTI: str = "jti"

TOKEN_TYPE_ACCESS: str = "access"
TOKEN_TYPE_REFRESH: str = "refresh"

_REQUIRED_CLAIMS = [CLAIM_SUB, CLAIM_TYP, CLAIM_IAT, CLAIM_EXP]


class InvalidTokenError(Exception):
    """Token con firma inválida, expirado, malformado o de otro tipo."""


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      TokenCodec

    Responsabilidades:
      - issue_access / issue_refresh -> IssuedToken(token, expires_at)
      - verify_access / verify_refresh -> user_id

    Colaboradores:
      - PyJWT
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings) -> "TokenCodec":
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.jwt_refresh_secret,
            access_ttl=timedelta(minutes=settings.jwt_access_ttl_minutes),
            refresh_ttl=timedelta(days=settings.jwt_refresh_ttl_days),
        )

    @property
    def refresh_ttl(self) -> timedelta:
        return self._refresh_ttl

    # ------------------------------------------------------------------
    # Emisión
    # ------------------------------------------------------------------
    def issue_access(self, user_id: UUID) -> IssuedToken:
        return self._issue(
            user_id, TOKEN_TYPE_ACCESS, self._access_secret, self._access_ttl
        )

    def issue_refresh(self, user_id: UUID) -> IssuedToken:
        return self._issue(
            user_id, TOKEN_TYPE_REFRESH, self._refresh_secret, self._refresh_ttl
        )

    def _issue(
        self, user_id: UUID, token_type: str, secret: str, ttl: timedelta
    ) -> IssuedToken:
        now = self._clock()
        expires_at = now + ttl
        payload: dict[str, object] = {
            CLAIM_SUB: str(user_id),
            CLAIM_TYP: token_type,
            CLAIM_IAT: int(now.timestamp()),
            CLAIM_EXP: int(expires_at.timestamp()),
            CLAIM_JTI: secrets.token_hex(16),
        }
        token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    # ------------------------------------------------------------------
    # Verificación
    # ------------------------------------------------------------------
    def verify_access(self, token: str) -> UUID:
        return self._verify(token, TOKEN_TYPE_ACCESS, self._access_secret)

    def verify_refresh(self, token: str) -> UUID:
        return self._verify(token, TOKEN_TYPE_REFRESH, self._refresh_secret)

    def _verify(self, token: str, expected_type: str, secret: str) -> UUID:
        if not token:
            raise InvalidTokenError("Token is empty")

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        if payload.get(CLAIM_TYP) != expected_type:
            raise InvalidTokenError("Invalid token type")

        try:
            return UUID(str(payload[CLAIM_SUB]))
        except ValueError as exc:
            raise InvalidTokenError("Invalid token subject") from exc
