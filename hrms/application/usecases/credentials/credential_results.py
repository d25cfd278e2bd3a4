"""
===============================================================================
CREDENTIAL USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Credential Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de autenticación y administración de credenciales.

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones
      "hacia afuera": la capa HTTP mapea code -> status (400/401/403/404/409).
    - Mensajes estables: el frontend existente los muestra tal cual.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    credential_results models (module)

Responsibilities:
    - CredentialErrorCode / CredentialError
    - Resultados: AuthSessionResult, AccessTokenResult, UserResult,
      UserListResult, CredentialActionResult

Collaborators:
    - identity.users.User
    - domain.entities.Company
    - interfaces/api/http/error_mapping.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import Company
from ....identity.users import User


class CredentialErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: inputs inválidos o incompletos.
      - UNAUTHORIZED: credenciales o tokens inválidos.
      - FORBIDDEN: actor sin permiso (rol / otra empresa / registro cerrado).
      - NOT_FOUND: usuario objetivo inexistente.
      - CONFLICT: email ya registrado.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class CredentialError:
    code: CredentialErrorCode
    message: str


@dataclass
class AuthSessionResult:
    """
    Login / registro exitoso: par de tokens + perfil.

    Contrato:
      - error is None => access_token, refresh_token y user presentes.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    user: User | None = None
    company: Company | None = None
    error: CredentialError | None = None


@dataclass
class AccessTokenResult:
    access_token: str | None = None
    error: CredentialError | None = None


@dataclass
class UserResult:
    user: User | None = None
    company: Company | None = None
    error: CredentialError | None = None


@dataclass
class UserListResult:
    users: List[User] = field(default_factory=list)
    error: CredentialError | None = None


@dataclass
class CredentialActionResult:
    """Comandos sin entidad de retorno (logout, reset, envío de email)."""

    message: str | None = None
    error: CredentialError | None = None


def error_of(code: CredentialErrorCode, message: str) -> CredentialError:
    return CredentialError(code=code, message=message)
