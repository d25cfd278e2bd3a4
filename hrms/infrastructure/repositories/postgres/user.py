"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios para autenticación (por id / email / login ID).
  - Listar usuarios por empresa (admin).
  - Actualizar password_hash.
  - Mapear filas crudas -> entidad `User` validando `UserRole`.

Collaborators:
  - infrastructure.db.pool.DatabasePool (inyectado)
  - identity.users.User / UserRole
  - crosscutting.exceptions.DatabaseError

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio.
  - Retorna None cuando no existe el recurso.
  - Rol persistido desconocido -> DatabaseError (drift de esquema).
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import User, UserRole, normalize_email
from .base import PostgresRepositoryBase

# R: Lista explícita de columnas: contrato con alembic/versions/001_identity.py.
USER_COLUMNS = """
    id, email, password_hash, first_name, last_name, role, company_id,
    employee_id, phone, avatar, department, position, created_at, updated_at
"""

_USER_ORDER_BY = "created_at DESC, id DESC"


def row_to_user(row: tuple) -> User:
    (
        user_id,
        email,
        password_hash,
        first_name,
        last_name,
        role,
        company_id,
        employee_id,
        phone,
        avatar,
        department,
        position,
        created_at,
        updated_at,
    ) = row

    try:
        user_role = UserRole(role)
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {role}") from exc

    return User(
        id=user_id,
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        role=user_role,
        company_id=company_id,
        employee_id=employee_id,
        phone=phone,
        avatar=avatar,
        department=department,
        position=position,
        created_at=created_at,
        updated_at=updated_at,
    )


class PostgresUserRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de UserRepository."""

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            context_msg="PostgresUserRepository: get_user_by_id failed",
            extra={"user_id": str(user_id)},
        )
        return row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {USER_COLUMNS} FROM users WHERE lower(email) = %s",
            params=(normalize_email(email),),
            context_msg="PostgresUserRepository: get_user_by_email failed",
            extra={"email": email},
        )
        return row_to_user(row) if row else None

    def get_user_by_login_id(self, login_id: str) -> Optional[User]:
        # R: email gana si ambos matchean (ORDER BY booleano: true primero).
        row = self._fetchone(
            query=f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE lower(email) = %s OR employee_id = %s
                ORDER BY (lower(email) = %s) DESC
                LIMIT 1
            """,
            params=(normalize_email(login_id), login_id, normalize_email(login_id)),
            context_msg="PostgresUserRepository: get_user_by_login_id failed",
            extra={"login_id": login_id},
        )
        return row_to_user(row) if row else None

    def list_users(self, *, company_id: UUID | None = None) -> list[User]:
        if company_id is None:
            where_sql, params = "", ()
        else:
            where_sql, params = "WHERE company_id = %s", (company_id,)

        rows = self._fetchall(
            query=f"""
                SELECT {USER_COLUMNS}
                FROM users
                {where_sql}
                ORDER BY {_USER_ORDER_BY}
            """,
            params=params,
            context_msg="PostgresUserRepository: list_users failed",
            extra={"company_id": str(company_id) if company_id else None},
        )
        return [row_to_user(r) for r in rows]

    def update_user_password(self, user_id: UUID, password_hash: str) -> bool:
        updated = self._execute(
            query="""
                UPDATE users
                SET password_hash = %s, updated_at = now()
                WHERE id = %s
            """,
            params=(password_hash, user_id),
            context_msg="PostgresUserRepository: update_user_password failed",
            extra={"user_id": str(user_id)},
        )
        return updated > 0
