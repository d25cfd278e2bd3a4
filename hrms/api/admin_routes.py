"""
===============================================================================
TARJETA CRC — hrms/api/admin_routes.py (Administración de usuarios)
===============================================================================

Responsabilidades:
  - Listar usuarios del tenant del admin.
  - Enviar credenciales (login ID + link para fijar password) por email.
  - Fijar la password de un usuario.

Colaboradores:
  - identity.auth_users.require_admin (401 sin token, 403 sin rol admin)
  - domain.tenant_policy.AdminActor
  - application.usecases.admin.*
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from ..application.usecases.admin import SendCredentialsInput, UpdateUserPasswordInput
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..domain.tenant_policy import AdminActor
from ..identity.auth_users import get_container, require_admin
from ..identity.users import User
from ..interfaces.api.http.error_mapping import raise_credential_error
from .schemas import SetPasswordRequest, success, user_summary

router = APIRouter(prefix="/admin", tags=["admin"], responses=OPENAPI_ERROR_RESPONSES)


@router.get("/users")
def list_users(request: Request, admin: User = Depends(require_admin())):
    result = get_container(request).list_users_use_case().execute(
        AdminActor.from_user(admin)
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success([user_summary(u) for u in result.users])


@router.post("/users/{user_id}/send-credentials")
def send_credentials(
    user_id: UUID, request: Request, admin: User = Depends(require_admin())
):
    result = get_container(request).send_credentials_use_case().execute(
        SendCredentialsInput(target_user_id=user_id, actor=AdminActor.from_user(admin))
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success(message=result.message)


@router.put("/users/{user_id}/password")
def update_user_password(
    user_id: UUID,
    req: SetPasswordRequest,
    request: Request,
    admin: User = Depends(require_admin()),
):
    result = get_container(request).update_user_password_use_case().execute(
        UpdateUserPasswordInput(
            target_user_id=user_id,
            new_password=req.password or "",
            actor=AdminActor.from_user(admin),
        )
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success(message=result.message)
