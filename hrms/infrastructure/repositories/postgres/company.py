"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/company.py
============================================================
Class: PostgresCompanyRepository

Responsibilities:
  - Consultas de tenants: existencia (gate de registro), por id, por nombre.
  - Pre-chequeo de unicidad de código de empresa.

Collaborators:
  - infrastructure.db.pool.DatabasePool
  - domain.entities.Company

Notes:
  - La inserción de empresas vive en PostgresAccountRepository
    (misma transacción que usuario + empleado).
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....domain.entities import Company
from .base import PostgresRepositoryBase

_COMPANY_COLUMNS = "id, name, code, logo, created_at"


def _row_to_company(row: tuple) -> Company:
    company_id, name, code, logo, created_at = row
    return Company(id=company_id, name=name, code=code, logo=logo, created_at=created_at)


class PostgresCompanyRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL de CompanyRepository."""

    def has_companies(self) -> bool:
        row = self._fetchone(
            query="SELECT EXISTS (SELECT 1 FROM companies)",
            params=(),
            context_msg="PostgresCompanyRepository: has_companies failed",
            extra={},
        )
        return bool(row and row[0])

    def get_company_by_id(self, company_id: UUID) -> Optional[Company]:
        row = self._fetchone(
            query=f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE id = %s",
            params=(company_id,),
            context_msg="PostgresCompanyRepository: get_company_by_id failed",
            extra={"company_id": str(company_id)},
        )
        return _row_to_company(row) if row else None

    def get_company_by_name(self, name: str) -> Optional[Company]:
        row = self._fetchone(
            query=f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE name = %s",
            params=(name,),
            context_msg="PostgresCompanyRepository: get_company_by_name failed",
            extra={"company_name": name},
        )
        return _row_to_company(row) if row else None

    def company_code_exists(self, code: str) -> bool:
        row = self._fetchone(
            query="SELECT EXISTS (SELECT 1 FROM companies WHERE code = %s)",
            params=(code,),
            context_msg="PostgresCompanyRepository: company_code_exists failed",
            extra={"company_code": code},
        )
        return bool(row and row[0])
