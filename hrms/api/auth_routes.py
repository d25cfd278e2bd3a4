"""
===============================================================================
TARJETA CRC — hrms/api/auth_routes.py (Autenticación)
===============================================================================

Responsabilidades:
  - Exponer login / logout / refresh / register / me.
  - Exponer forgot-password / reset-password (destino del link de email).
  - Traducir HTTP <-> casos de uso (sin lógica de negocio).

Patrones aplicados:
  - Adapter / Presentation Layer.
  - Fail-safe security: errores de caso de uso -> 4xx vía error_mapping.

Colaboradores:
  - container.Container (factories de casos de uso)
  - identity.auth_users: extract_bearer_token, require_user
  - interfaces.api.http.error_mapping.raise_credential_error
  - api.schemas: DTOs + envelope
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request, status

from ..application.usecases.credentials import (
    LoginInput,
    LogoutInput,
    RefreshSessionInput,
    RegisterInitialAdminInput,
    RequestPasswordResetInput,
    ResetPasswordInput,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.auth_users import extract_bearer_token, get_container, require_user
from ..identity.users import User
from ..interfaces.api.http.error_mapping import raise_credential_error
from .schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    success,
    user_profile,
)

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


@router.post("/login")
def login(req: LoginRequest, request: Request):
    """Login con employee ID (login ID) o email."""
    result = get_container(request).login_use_case().execute(
        LoginInput(login_id=req.login_id or "", password=req.password or "")
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success(
        {
            "accessToken": result.access_token,
            "refreshToken": result.refresh_token,
            "user": user_profile(result.user, result.company),
        }
    )


@router.post("/logout")
def logout(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
):
    """
    Revoca el refresh token enviado como Bearer.

    Idempotente: sin token o con token desconocido responde 200 igual.
    """
    result = get_container(request).logout_use_case().execute(
        LogoutInput(refresh_token=extract_bearer_token(authorization))
    )
    return success(message=result.message)


@router.post("/refresh")
def refresh(req: RefreshRequest, request: Request):
    result = get_container(request).refresh_session_use_case().execute(
        RefreshSessionInput(refresh_token=req.refresh_token)
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success({"accessToken": result.access_token})


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, request: Request):
    """Setup inicial: sólo permitido mientras no exista ninguna empresa."""
    result = get_container(request).register_initial_admin_use_case().execute(
        RegisterInitialAdminInput(
            company_name=req.company_name or "",
            full_name=req.name or "",
            email=req.email or "",
            password=req.password or "",
            phone=req.phone,
            company_logo=req.company_logo,
        )
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success(
        {
            "accessToken": result.access_token,
            "refreshToken": result.refresh_token,
            "user": user_profile(result.user, result.company),
        }
    )


@router.get("/me")
def me(request: Request, user: User = Depends(require_user())):
    return success(user_profile(user, getattr(request.state, "company", None)))


@router.post("/forgot-password")
def forgot_password(req: ForgotPasswordRequest, request: Request):
    result = get_container(request).request_password_reset_use_case().execute(
        RequestPasswordResetInput(email=req.email or "")
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success(message=result.message)


@router.post("/reset-password")
def reset_password(req: ResetPasswordRequest, request: Request):
    result = get_container(request).reset_password_use_case().execute(
        ResetPasswordInput(
            token=req.token or "",
            new_password=req.password or "",
            email=req.email,
        )
    )
    if result.error is not None:
        raise_credential_error(result.error)

    return success(message=result.message)
