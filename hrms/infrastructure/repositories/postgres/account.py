"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/account.py
============================================================
Class: PostgresAccountRepository

Responsibilities:
  - Alta atómica: empresa (opcional) + usuario + empleado en UNA transacción.
  - Traducir unicidades violadas a DuplicateKeyError(field).
  - Con only_if_no_companies: LOCK de companies y RegistrationClosedError si
    ya existe alguna (gate del registro inicial dentro de la transacción).

Collaborators:
  - infrastructure.db.pool.DatabasePool
  - identity.users.User
  - domain.entities.Company, Employee

Garantía:
  - Si cualquier INSERT falla, no queda ni la empresa, ni el usuario, ni el
    empleado (rollback de conn.transaction()).
============================================================
"""

from __future__ import annotations

from ....crosscutting.exceptions import RegistrationClosedError
from ....domain.entities import Company, Employee
from ....identity.users import User
from .base import PostgresRepositoryBase


class PostgresAccountRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de AccountRepository."""

    def create_account(
        self,
        *,
        user: User,
        employee: Employee,
        company: Company | None = None,
        only_if_no_companies: bool = False,
    ) -> None:
        extra = {
            "user_id": str(user.id),
            "employee_id": employee.employee_id,
            "new_company": company is not None,
        }
        try:
            with self._pool.connection() as conn:
                with conn.transaction():
                    if only_if_no_companies:
                        # Serializa altas concurrentes hasta el commit.
                        conn.execute("LOCK TABLE companies IN EXCLUSIVE MODE")
                        row = conn.execute(
                            "SELECT EXISTS (SELECT 1 FROM companies)"
                        ).fetchone()
                        if row and row[0]:
                            raise RegistrationClosedError()

                    if company is not None:
                        conn.execute(
                            """
                            INSERT INTO companies (id, name, code, logo, created_at)
                            VALUES (%s, %s, %s, %s, COALESCE(%s, now()))
                            """,
                            (
                                company.id,
                                company.name,
                                company.code,
                                company.logo,
                                company.created_at,
                            ),
                        )

                    conn.execute(
                        """
                        INSERT INTO users (
                            id, email, password_hash, first_name, last_name, role,
                            company_id, employee_id, phone, avatar, department,
                            position, created_at, updated_at
                        )
                        VALUES (
                            %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                            COALESCE(%s, now()), COALESCE(%s, now())
                        )
                        """,
                        (
                            user.id,
                            user.email,
                            user.password_hash,
                            user.first_name,
                            user.last_name,
                            user.role.value,
                            user.company_id,
                            user.employee_id,
                            user.phone,
                            user.avatar,
                            user.department,
                            user.position,
                            user.created_at,
                            user.updated_at,
                        ),
                    )

                    conn.execute(
                        """
                        INSERT INTO employees (
                            id, employee_id, user_id, email, first_name, last_name,
                            phone, department, position, status, hire_date, salary,
                            company_id
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            employee.id,
                            employee.employee_id,
                            employee.user_id,
                            employee.email,
                            employee.first_name,
                            employee.last_name,
                            employee.phone,
                            employee.department,
                            employee.position,
                            employee.status.value,
                            employee.hire_date,
                            employee.salary,
                            employee.company_id,
                        ),
                    )
        except Exception as exc:
            raise self._fail(
                "PostgresAccountRepository: create_account failed", extra, exc
            ) from exc
