"""
===============================================================================
TARJETA CRC — hrms/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones internas al envelope de error JSON.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos (host, usuario, SQL) en producción.

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, factories, handlers
  - crosscutting.exceptions: HRMSError y derivadas
  - crosscutting.config.get_settings (nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    app_exception_handler,
    database_error,
    internal_error,
    validation_exception_handler,
)
from ..crosscutting.exceptions import DatabaseError, HRMSError
from ..crosscutting.logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _settings_for(request: Request):
    return getattr(request.app.state, "settings", None) or get_settings()


def _public_detail(request: Request, raw: str) -> str | None:
    """Texto crudo solo fuera de producción; None = usar el mensaje fijo."""
    if _settings_for(request).is_production():
        return None
    return raw or None


async def _handle_service_error(
    request: Request,
    *,
    exc: HRMSError,
    factory: Callable[..., AppHTTPException],
) -> JSONResponse:
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        extra={
            "error_id": exc.error_id,
            "error_code": exc.error_code,
            "error": exc.message,
            "request_id": request_id,
        },
    )

    detail = _public_detail(request, exc.message)
    app_exc = factory(detail) if detail else factory()
    app_exc.errors = [{"error_id": exc.error_id}]
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, factory=database_error)


async def hrms_error_handler(request: Request, exc: HRMSError) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, factory=internal_error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en producción.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    detail = _public_detail(request, str(exc))
    return await app_exception_handler(
        request, internal_error(detail) if detail else internal_error()
    )


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Exception genérica va al final como fallback.
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(HRMSError, hrms_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
