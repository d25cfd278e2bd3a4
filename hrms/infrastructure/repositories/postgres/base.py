"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Centralizar ejecución de SQL sobre el DatabasePool inyectado.
  - Logging estructurado + DatabaseError consistentes.
  - Traducir UniqueViolation -> DuplicateKeyError(field).

Collaborators:
  - infrastructure.db.pool.DatabasePool
  - infrastructure.db.errors.duplicate_key_from
  - crosscutting.exceptions.DatabaseError / DuplicateKeyError

Constraints:
  - SQL parametrizado siempre (nunca interpolar input de usuario).
  - Errores tipados (DuplicateKeyError, RegistrationClosedError) se propagan
    tal cual (el caso de uso decide).
============================================================
"""

from __future__ import annotations

from typing import Iterable

from psycopg import errors as pg_errors

from ....crosscutting.exceptions import DatabaseError, HRMSError
from ....crosscutting.logger import logger
from ...db.errors import duplicate_key_from
from ...db.pool import DatabasePool


class PostgresRepositoryBase:
    def __init__(self, pool: DatabasePool) -> None:
        self._pool = pool

    def _fail(self, context_msg: str, extra: dict, exc: Exception) -> Exception:
        if isinstance(exc, HRMSError):
            return exc
        if isinstance(exc, pg_errors.UniqueViolation):
            dup = duplicate_key_from(exc)
            logger.info(
                context_msg,
                extra={**extra, "duplicate_field": dup.field},
            )
            return dup
        logger.exception(context_msg, extra={**extra, "error": str(exc)})
        return DatabaseError(f"{context_msg}: {exc}", original_error=exc)

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            with self._pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            raise self._fail(context_msg, extra, exc) from exc

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            with self._pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            raise self._fail(context_msg, extra, exc) from exc

    def _execute(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> int:
        """Ejecuta INSERT/UPDATE/DELETE y devuelve rowcount."""
        try:
            with self._pool.connection() as conn:
                return conn.execute(query, tuple(params)).rowcount
        except Exception as exc:
            raise self._fail(context_msg, extra, exc) from exc
