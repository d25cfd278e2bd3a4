# hrms/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas de error estándar (envelope JSON)
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP con el mismo envelope que usa el frontend:

  {"status": "error", "message": "...", "error": "Unauthorized",
   "code": "UNAUTHORIZED", "request_id": "..."}

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + handlers

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir el envelope de error (ErrorEnvelope)
  - Proveer factories de errores frecuentes
  - Proveer handlers FastAPI (incluye validación de body -> 400)

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (mapea errores internos)
  - interfaces/api/http/error_mapping.py (mapea errores de casos de uso)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorEnvelope(BaseModel):
    """
    Envelope de error.

    Campos extra:
    - code: error code estable para clientes
    - errors: lista opcional de detalles (ej: [{"field":"email","msg":"..."}])
    """

    status: str = "error"
    message: str
    error: str
    code: ErrorCode
    request_id: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES = {
    str(status): {"description": description, "model": ErrorEnvelope}
    for status, description in (
        (400, "Bad Request"),
        (401, "Unauthorized"),
        (403, "Forbidden"),
        (404, "Not Found"),
        (409, "Conflict"),
    )
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable
      - Transportar errores de validación (errors[])

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def unauthorized(detail: str = "Authentication required") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def forbidden(detail: str = "Access denied") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def not_found(detail: str = "Resource not found") -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def internal_error(detail: str = "Internal server error") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def database_error(
    detail: str = "Database temporarily unavailable",
) -> AppHTTPException:
    return AppHTTPException(503, ErrorCode.DATABASE_ERROR, detail)


def _title(code: ErrorCode) -> str:
    return code.value.replace("_", " ").title()


def _request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler para AppHTTPException: envelope + headers opcionales."""
    envelope = ErrorEnvelope(
        message=str(exc.detail),
        error=_title(exc.code),
        code=exc.code,
        request_id=_request_id(request),
        errors=exc.errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Body/params inválidos -> 400 (no 422) con el detalle por campo.

    El message usa el primer error para que el cliente tenga algo legible.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    first = errors[0] if errors else None
    message = (
        f"{first['field']}: {first['msg']}"
        if first and first["field"]
        else "Invalid request body"
    )
    return await app_exception_handler(
        request, validation_error(message, errors=errors or None)
    )
