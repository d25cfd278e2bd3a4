"""
===============================================================================
TARJETA CRC — hrms/api/schemas.py (DTOs HTTP)
===============================================================================

Responsabilidades:
  - Modelos de request (camelCase en el wire, snake_case en Python).
  - Envelope de éxito {"status": "success", "data"?, "message"?}.
  - Serializar perfiles de usuario (sin password_hash) con su empresa.

Colaboradores:
  - api/auth_routes.py, api/admin_routes.py
  - identity.users.User, domain.entities.Company

Notas:
  - Los campos de negocio son opcionales a nivel schema: la validación con
    mensajes de dominio la hacen los casos de uso (400 con el mismo envelope).
===============================================================================
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..domain.entities import Company
from ..identity.users import User


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False)


class LoginRequest(_CamelModel):
    login_id: str | None = Field(default=None, alias="loginId", max_length=320)
    password: str | None = Field(default=None, max_length=512)


class RefreshRequest(_CamelModel):
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class RegisterRequest(_CamelModel):
    company_name: str | None = Field(default=None, alias="companyName", max_length=200)
    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=50)
    password: str | None = Field(default=None, max_length=512)
    company_logo: str | None = Field(default=None, alias="companyLogo")


class ForgotPasswordRequest(_CamelModel):
    email: str | None = Field(default=None, max_length=320)


class ResetPasswordRequest(_CamelModel):
    token: str | None = None
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=512)


class SetPasswordRequest(_CamelModel):
    password: str | None = Field(default=None, max_length=512)


# -----------------------------------------------------------------------------
# Respuestas
# -----------------------------------------------------------------------------


def success(data: Any = None, *, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"status": "success"}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def user_profile(user: User, company: Company | None = None) -> dict[str, Any]:
    profile = user.to_public_dict()
    if company is not None:
        profile["company"] = company.to_public_dict()
    return profile


def user_summary(user: User) -> dict[str, Any]:
    """Fila del listado admin."""
    return {
        "id": str(user.id),
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "employeeId": user.employee_id,
        "role": user.role.value,
        "companyId": str(user.company_id) if user.company_id else None,
        "avatar": user.avatar,
    }
