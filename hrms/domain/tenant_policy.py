"""
===============================================================================
TARJETA CRC — domain/tenant_policy.py
===============================================================================

Módulo:
    Política de alcance por empresa (tenant scope) para acciones de admin

Responsabilidades:
    - Definir el actor de las operaciones administrativas.
    - Decidir si un admin puede operar sobre un usuario objetivo.

Colaboradores:
    - identity.users.User / UserRole
    - application/usecases/admin/*

Reglas:
    - Sólo role ADMIN administra usuarios.
    - Admin con company_id: sólo usuarios de SU empresa.
    - Admin sin company_id (global): cualquier usuario.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ..identity.users import User, UserRole


@dataclass(frozen=True, slots=True)
class AdminActor:
    """Actor para decisiones administrativas."""

    user_id: UUID | None
    role: UserRole | None
    company_id: UUID | None = None

    @classmethod
    def from_user(cls, user: User) -> "AdminActor":
        return cls(user_id=user.id, role=user.role, company_id=user.company_id)


def is_admin(actor: AdminActor | None) -> bool:
    return (
        actor is not None and actor.user_id is not None and actor.role == UserRole.ADMIN
    )


def can_manage_user(actor: AdminActor, target: User) -> bool:
    if actor.company_id is None:
        return True
    return target.company_id == actor.company_id
