"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/tokens.py
============================================================
Classes:
  - PostgresRefreshTokenRepository
  - PostgresPasswordResetTokenRepository

Responsibilities:
  - Persistir / buscar / borrar registros de refresh tokens (multi-device).
  - Persistir / buscar / borrar tokens de reset de password.

Collaborators:
  - infrastructure.db.pool.DatabasePool
  - domain.entities.RefreshToken, PasswordResetToken

Notes:
  - No hay purga automática de vencidos: la validez se evalúa al leer.
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....domain.entities import PasswordResetToken, RefreshToken
from .base import PostgresRepositoryBase


class PostgresRefreshTokenRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de RefreshTokenRepository."""

    def create_refresh_token(self, token: RefreshToken) -> None:
        self._execute(
            query="""
                INSERT INTO refresh_tokens (token, user_id, expires_at, created_at)
                VALUES (%s, %s, %s, COALESCE(%s, now()))
            """,
            params=(token.token, token.user_id, token.expires_at, token.created_at),
            context_msg="PostgresRefreshTokenRepository: create failed",
            extra={"user_id": str(token.user_id)},
        )

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]:
        row = self._fetchone(
            query="""
                SELECT token, user_id, expires_at, created_at
                FROM refresh_tokens
                WHERE token = %s
            """,
            params=(token,),
            context_msg="PostgresRefreshTokenRepository: get failed",
            extra={},
        )
        if not row:
            return None
        return RefreshToken(
            token=row[0], user_id=row[1], expires_at=row[2], created_at=row[3]
        )

    def delete_refresh_token(self, token: str) -> bool:
        deleted = self._execute(
            query="DELETE FROM refresh_tokens WHERE token = %s",
            params=(token,),
            context_msg="PostgresRefreshTokenRepository: delete failed",
            extra={},
        )
        return deleted > 0

    def delete_user_refresh_tokens(self, user_id: UUID) -> int:
        return self._execute(
            query="DELETE FROM refresh_tokens WHERE user_id = %s",
            params=(user_id,),
            context_msg="PostgresRefreshTokenRepository: delete_user failed",
            extra={"user_id": str(user_id)},
        )


class PostgresPasswordResetTokenRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de PasswordResetTokenRepository."""

    def create_reset_token(self, token: PasswordResetToken) -> None:
        self._execute(
            query="""
                INSERT INTO password_reset_tokens
                    (token, user_id, email, expires_at, created_at)
                VALUES (%s, %s, %s, %s, COALESCE(%s, now()))
            """,
            params=(
                token.token,
                token.user_id,
                token.email,
                token.expires_at,
                token.created_at,
            ),
            context_msg="PostgresPasswordResetTokenRepository: create failed",
            extra={"user_id": str(token.user_id)},
        )

    def get_reset_token(self, token: str) -> Optional[PasswordResetToken]:
        row = self._fetchone(
            query="""
                SELECT token, user_id, email, expires_at, created_at
                FROM password_reset_tokens
                WHERE token = %s
            """,
            params=(token,),
            context_msg="PostgresPasswordResetTokenRepository: get failed",
            extra={},
        )
        if not row:
            return None
        return PasswordResetToken(
            token=row[0],
            user_id=row[1],
            email=row[2],
            expires_at=row[3],
            created_at=row[4],
        )

    def delete_reset_token(self, token: str) -> bool:
        deleted = self._execute(
            query="DELETE FROM password_reset_tokens WHERE token = %s",
            params=(token,),
            context_msg="PostgresPasswordResetTokenRepository: delete failed",
            extra={},
        )
        return deleted > 0
