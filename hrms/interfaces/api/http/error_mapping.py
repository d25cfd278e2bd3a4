"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP envelope)
===============================================================================

Responsabilidades:
  - Traducir CredentialErrorCode a AppHTTPException.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener application libre de HTTP.

Tabla:
  VALIDATION_ERROR -> 400 | UNAUTHORIZED -> 401 | FORBIDDEN -> 403
  NOT_FOUND -> 404        | CONFLICT -> 409

Colaboradores:
  - application.usecases.credentials.CredentialErrorCode / CredentialError
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from ....application.usecases.credentials import CredentialError, CredentialErrorCode
from ....crosscutting.error_responses import (
    AppHTTPException,
    conflict,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)


def credential_error_to_http(error: CredentialError) -> AppHTTPException:
    if error.code == CredentialErrorCode.UNAUTHORIZED:
        return unauthorized(error.message)
    if error.code == CredentialErrorCode.FORBIDDEN:
        return forbidden(error.message)
    if error.code == CredentialErrorCode.NOT_FOUND:
        return not_found(error.message)
    if error.code == CredentialErrorCode.CONFLICT:
        return conflict(error.message)
    # VALIDATION_ERROR y cualquier código nuevo: 400.
    return validation_error(error.message)


def raise_credential_error(error: CredentialError) -> NoReturn:
    raise credential_error_to_http(error)
