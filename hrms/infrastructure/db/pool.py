"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  DatabasePool (handle inyectable del pool de conexiones PostgreSQL)

Responsabilidades:
  - Abrir, exponer y cerrar el psycopg_pool.ConnectionPool.
  - Configurar conexiones (statement_timeout).
  - Health check liviano (SELECT 1) para /health.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - api/main.py (lifespan: open() / close())
  - infrastructure/repositories/postgres/* (reciben el handle por __init__)

Principios:
  - Sin singleton de módulo: cada app/lifespan crea y cierra su handle.
  - Fail-fast (doble open, uso sin open)
===============================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from ...crosscutting.logger import logger
from .errors import PoolAlreadyOpenError, PoolNotOpenError


class DatabasePool:
    """Handle del pool: open() en startup, close() en shutdown."""

    def __init__(
        self,
        database_url: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
        statement_timeout_ms: int = 0,
    ) -> None:
        self._database_url = database_url
        self._min_size = min_size
        self._max_size = max_size
        self._statement_timeout_ms = statement_timeout_ms
        self._pool = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "DatabasePool":
        return cls(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def _configure_connection(self, conn) -> None:
        # Guardrail contra queries colgadas.
        if self._statement_timeout_ms > 0:
            conn.execute(f"SET statement_timeout = {int(self._statement_timeout_ms)}")
            conn.commit()

    def open(self) -> "DatabasePool":
        with self._lock:
            if self._pool is not None:
                raise PoolAlreadyOpenError("El pool ya fue abierto.")

            # Lazy import: el server puede importar módulos sin DB (tests).
            from psycopg_pool import ConnectionPool

            logger.info(
                "Abriendo pool DB",
                extra={"min_size": self._min_size, "max_size": self._max_size},
            )
            self._pool = ConnectionPool(
                conninfo=self._database_url,
                min_size=self._min_size,
                max_size=self._max_size,
                configure=self._configure_connection,
                open=True,
            )
            return self

    def close(self) -> None:
        """Cierra el pool (idempotente)."""
        with self._lock:
            if self._pool is None:
                return
            logger.info("Cerrando pool DB")
            try:
                self._pool.close()
            finally:
                self._pool = None

    @contextmanager
    def connection(self) -> Iterator:
        """
        Conexión del pool. Al salir sin excepción hace commit; con excepción,
        rollback (comportamiento de psycopg_pool).
        """
        if self._pool is None:
            raise PoolNotOpenError("Pool no abierto. Llamar open() primero.")
        with self._pool.connection() as conn:
            yield conn

    def ping(self) -> bool:
        """True si la DB responde a SELECT 1."""
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as exc:
            logger.warning("Health check DB falló", extra={"error": str(exc)})
            return False
