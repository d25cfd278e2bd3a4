"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del Pool + traducción de violaciones de unicidad

Responsabilidades:
  - Evitar RuntimeError genéricos: "no abierto", "ya abierto".
  - Traducir psycopg UniqueViolation -> DuplicateKeyError(field) usando el
    nombre de la constraint (contrato con alembic/versions/001_identity.py).
===============================================================================
"""

from __future__ import annotations

from ...crosscutting.exceptions import DuplicateKeyError


class DatabasePoolError(Exception):
    """Base de errores de pool de base de datos."""


class PoolAlreadyOpenError(DatabasePoolError):
    """Se intentó abrir el pool más de una vez."""


class PoolNotOpenError(DatabasePoolError):
    """Se intentó usar el pool sin open()."""


# Nombre de constraint -> campo único de dominio.
UNIQUE_CONSTRAINT_FIELDS: dict[str, str] = {
    "uq_users_email": "email",
    "uq_users_email_lower": "email",
    "uq_users_employee_id": "employee_id",
    "uq_employees_employee_id": "employee_id",
    "uq_employees_user_id": "user_id",
    "uq_companies_code": "company_code",
    "uq_companies_name": "company_name",
    "uq_refresh_tokens_token": "token",
    "uq_password_reset_tokens_token": "token",
}


def duplicate_key_from(exc: Exception) -> DuplicateKeyError:
    """
    Construye DuplicateKeyError a partir de un psycopg.errors.UniqueViolation.

    Constraints desconocidas quedan con field="unknown" (el caso de uso la
    re-lanza).
    """
    diag = getattr(exc, "diag", None)
    constraint = getattr(diag, "constraint_name", None) or ""
    field = UNIQUE_CONSTRAINT_FIELDS.get(constraint, "unknown")
    return DuplicateKeyError(
        field,
        message=f"Unique constraint violated: {constraint or 'unknown'}",
        original_error=exc,
    )
