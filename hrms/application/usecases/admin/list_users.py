"""
===============================================================================
USE CASE: List Users (admin)
===============================================================================

Class:
    ListUsersUseCase

Responsibilities:
    - Listar usuarios visibles para el admin (su empresa o todos si es global).
    - Orden: más nuevos primero.

Collaborators:
    - UserRepository.list_users(company_id=...)
    - domain.tenant_policy.AdminActor
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import UserRepository
from ....domain.tenant_policy import AdminActor, is_admin
from ..credentials.credential_results import CredentialErrorCode, UserListResult, error_of


class ListUsersUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, actor: AdminActor | None) -> UserListResult:
        if not is_admin(actor):
            return UserListResult(
                error=error_of(CredentialErrorCode.FORBIDDEN, "Admin access required")
            )

        return UserListResult(users=self._users.list_users(company_id=actor.company_id))
