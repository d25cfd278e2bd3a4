"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario (cuenta de login)

Responsabilidades:
    - Definir el enum de roles del HRMS.
    - Definir el dataclass User (cuenta con credenciales).
    - Proveer la vista pública del usuario (sin password_hash).

Colaboradores:
    - identity/auth_users.py: resuelve el User actual desde el access token.
    - infrastructure/repositories/*: mapean filas/registros -> User.
    - application/usecases/*: devuelven perfiles vía to_public_dict().

Notas:
    - employee_id ES el login ID (mismo valor que Employee.employee_id).
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados por el HRMS."""

    ADMIN = "admin"
    HR = "hr"
    PAYROLL = "payroll"
    EMPLOYEE = "employee"


def normalize_email(email: str | None) -> str:
    """Forma canónica del email: sin espacios y en minúsculas."""
    return (email or "").strip().lower()


@dataclass(frozen=True, slots=True)
class User:
    """Cuenta de usuario con credenciales."""

    id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: UserRole
    company_id: UUID | None = None
    employee_id: str | None = None
    phone: str | None = None
    avatar: str | None = None
    department: str | None = None
    position: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def login_id(self) -> str:
        """Identificador que se comunica al usuario: employee_id o email."""
        return self.employee_id or self.email

    def to_public_dict(self) -> dict[str, Any]:
        """Perfil serializable (camelCase) sin el hash de password."""
        return {
            "id": str(self.id),
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "employeeId": self.employee_id,
            "companyId": str(self.company_id) if self.company_id else None,
            "phone": self.phone,
            "avatar": self.avatar,
            "department": self.department,
            "position": self.position,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
