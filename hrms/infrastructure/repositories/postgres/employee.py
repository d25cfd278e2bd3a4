"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/employee.py
============================================================
Class: PostgresEmployeeRepository

Responsibilities:
  - Consultas de identificadores de empleado (existencia, conteo por prefijo).

Collaborators:
  - infrastructure.db.pool.DatabasePool
  - identity.identifiers.IdentifierGenerator (consumidor)

Notes:
  - El prefijo se pasa como parámetro de LIKE; los employee ids son
    alfanuméricos, no contienen % ni _.
============================================================
"""

from __future__ import annotations

from uuid import UUID

from .base import PostgresRepositoryBase


class PostgresEmployeeRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de EmployeeRepository."""

    def employee_id_exists(self, employee_id: str) -> bool:
        # R: users.employee_id y employees.employee_id deben coincidir; se miran ambos.
        row = self._fetchone(
            query="""
                SELECT EXISTS (SELECT 1 FROM employees WHERE employee_id = %s)
                    OR EXISTS (SELECT 1 FROM users WHERE employee_id = %s)
            """,
            params=(employee_id, employee_id),
            context_msg="PostgresEmployeeRepository: employee_id_exists failed",
            extra={"employee_id": employee_id},
        )
        return bool(row and row[0])

    def count_employee_ids_with_prefix(
        self, prefix: str, *, company_id: UUID | None = None
    ) -> int:
        if company_id is None:
            where_sql, params = "employee_id LIKE %s", (f"{prefix}%",)
        else:
            where_sql, params = (
                "employee_id LIKE %s AND company_id = %s",
                (f"{prefix}%", company_id),
            )

        row = self._fetchone(
            query=f"SELECT COUNT(*) FROM employees WHERE {where_sql}",
            params=params,
            context_msg="PostgresEmployeeRepository: count_employee_ids_with_prefix failed",
            extra={"prefix": prefix},
        )
        return int(row[0]) if row else 0
