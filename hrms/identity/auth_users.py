"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Dependencias FastAPI de autenticación (Bearer JWT)

Responsabilidades:
    - Extraer el token de `Authorization: Bearer <token>`.
    - Resolver el usuario actual vía GetCurrentUserUseCase.
    - Exponer dependencias FastAPI (require_user, require_role, require_admin).

Colaboradores:
    - container.Container (app.state.container)
    - application.usecases.credentials.GetCurrentUserUseCase
    - interfaces.api.http.error_mapping (401/403 estándar)
    - identity.users: User / UserRole

Decisiones:
    - La validación del JWT vive en identity/tokens.py; acá sólo el borde HTTP.
    - No loguear tokens.
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Header, Request

from ..application.usecases.credentials import GetCurrentUserInput
from ..crosscutting.error_responses import forbidden, unauthorized
from ..interfaces.api.http.error_mapping import raise_credential_error
from .users import User, UserRole


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def get_container(request: Request):
    """Container de la app (lo instala create_app / lifespan)."""
    return request.app.state.container


def resolve_current_user(request: Request, authorization: str | None) -> User:
    token = extract_bearer_token(authorization)
    if not token:
        raise unauthorized("Access token required")

    result = get_container(request).get_current_user_use_case().execute(
        GetCurrentUserInput(access_token=token)
    )
    if result.error is not None:
        raise_credential_error(result.error)

    request.state.user = result.user
    request.state.company = result.company
    return result.user


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_user() -> Callable:
    """Dependency FastAPI: requiere usuario autenticado por JWT."""

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        return resolve_current_user(request, authorization)

    return dependency


def require_role(*roles: UserRole | str) -> Callable:
    """Dependency FastAPI: requiere alguno de los roles indicados."""
    allowed = {UserRole(r) for r in roles}

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        user = resolve_current_user(request, authorization)
        if user.role not in allowed:
            raise forbidden("Insufficient permissions")
        return user

    return dependency


def require_admin() -> Callable:
    return require_role(UserRole.ADMIN)
