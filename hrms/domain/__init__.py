"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio

Responsabilidades:
    - Centralizar exports para imports limpios en application/infrastructure.

Colaboradores:
    - domain.entities: Company, Employee, RefreshToken, PasswordResetToken
    - domain.repositories: Puertos de persistencia
    - domain.services: Puerto de notificación
    - domain.tenant_policy: Alcance por empresa de los admins
===============================================================================
"""

from .entities import (
    Company,
    Employee,
    EmployeeStatus,
    PasswordResetToken,
    RefreshToken,
)
from .repositories import (
    AccountRepository,
    CompanyRepository,
    EmployeeRepository,
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    UserRepository,
)
from .services import CredentialNotifier
from .tenant_policy import AdminActor, can_manage_user, is_admin

__all__ = [
    "Company",
    "Employee",
    "EmployeeStatus",
    "PasswordResetToken",
    "RefreshToken",
    "AccountRepository",
    "CompanyRepository",
    "EmployeeRepository",
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "UserRepository",
    "CredentialNotifier",
    "AdminActor",
    "can_manage_user",
    "is_admin",
]
