# hrms/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend HRMS (errores internos)
===============================================================================

Objetivo
--------
Errores internos que NO son resultados de negocio (esos viajan como
CredentialResult). Cada excepción tiene:
- error_code estable
- error_id para correlación con logs

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  HRMSError + subclases

Responsabilidades:
  - Estandarizar fallas de infraestructura (DB, SMTP, generación de IDs)
  - Transportar el campo único violado (DuplicateKeyError.field)

Colaboradores:
  - api/exception_handlers.py (mapea a respuestas HTTP)
  - infrastructure/db/errors.py (traduce UniqueViolation)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class HRMSError(Exception):
    """Base para errores internos del sistema (error_code + error_id + message)."""

    error_code: str = "HRMS_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(HRMSError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateKeyError(DatabaseError):
    """
    Violación de unicidad.

    field indica qué restricción se violó: email, employee_id, company_code,
    company_name o token. Los casos de uso deciden si es CONFLICT o reintento.
    """

    error_code: str = "DUPLICATE_KEY"

    def __init__(
        self,
        field: str,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        self.field = field
        super().__init__(
            message or f"Duplicate value for unique field '{field}'",
            original_error=original_error,
        )


class NotificationError(HRMSError):
    """Falla al despachar un email (SMTP caído, credenciales, timeout)."""

    error_code: str = "NOTIFICATION_ERROR"


class IdentifierGenerationError(HRMSError):
    """No se pudo obtener un código de empresa / employee id libre."""

    error_code: str = "IDENTIFIER_GENERATION_ERROR"


class RegistrationClosedError(HRMSError):
    """Alta de tenant rechazada dentro de la escritura: ya existe una empresa."""

    error_code: str = "REGISTRATION_CLOSED"

    def __init__(self, message: str = "A company already exists"):
        super().__init__(message)
