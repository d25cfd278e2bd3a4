"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/identity_store.py
============================================================
Class: InMemoryIdentityStore

Responsibilities:
  - Implementar TODOS los puertos de identidad en memoria:
      UserRepository, CompanyRepository, EmployeeRepository,
      AccountRepository, RefreshTokenRepository,
      PasswordResetTokenRepository
  - Replicar las unicidades de Postgres (email, employee_id, código y
    nombre de empresa, tokens) lanzando DuplicateKeyError(field).
  - Mantener ordering alineado con Postgres: created_at DESC, id DESC.

Collaborators:
  - domain.repositories (contratos)
  - crosscutting.exceptions.DuplicateKeyError

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - create_account valida todo ANTES de escribir: atómico como la transacción SQL.
  - Data se pierde al reiniciar el proceso (tests / dev).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateKeyError, RegistrationClosedError
from ....domain.entities import Company, Employee, PasswordResetToken, RefreshToken
from ....identity.users import User, normalize_email


class InMemoryIdentityStore:
    """Store in-memory thread-safe de usuarios, empresas, empleados y tokens."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}
        self._companies: Dict[UUID, Company] = {}
        self._employees: Dict[UUID, Employee] = {}
        self._refresh_tokens: Dict[str, RefreshToken] = {}
        self._reset_tokens: Dict[str, PasswordResetToken] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _created_sort_key(user: User) -> tuple[float, str]:
        created = user.created_at or datetime.min.replace(tzinfo=timezone.utc)
        return (created.timestamp(), str(user.id))

    # =========================================================
    # UserRepository
    # =========================================================
    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        wanted = normalize_email(email)
        with self._lock:
            return next(
                (u for u in self._users.values() if normalize_email(u.email) == wanted),
                None,
            )

    def get_user_by_login_id(self, login_id: str) -> Optional[User]:
        with self._lock:
            wanted = normalize_email(login_id)
            by_email = next(
                (u for u in self._users.values() if normalize_email(u.email) == wanted),
                None,
            )
            if by_email is not None:
                return by_email
            return next(
                (u for u in self._users.values() if u.employee_id == login_id), None
            )

    def list_users(self, *, company_id: UUID | None = None) -> List[User]:
        with self._lock:
            users = [
                u
                for u in self._users.values()
                if company_id is None or u.company_id == company_id
            ]
        return sorted(users, key=self._created_sort_key, reverse=True)

    def update_user_password(self, user_id: UUID, password_hash: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            self._users[user_id] = replace(
                user, password_hash=password_hash, updated_at=self._now()
            )
            return True

    # =========================================================
    # CompanyRepository
    # =========================================================
    def has_companies(self) -> bool:
        with self._lock:
            return bool(self._companies)

    def get_company_by_id(self, company_id: UUID) -> Optional[Company]:
        with self._lock:
            return self._companies.get(company_id)

    def get_company_by_name(self, name: str) -> Optional[Company]:
        with self._lock:
            return next((c for c in self._companies.values() if c.name == name), None)

    def company_code_exists(self, code: str) -> bool:
        with self._lock:
            return any(c.code == code for c in self._companies.values())

    # =========================================================
    # EmployeeRepository
    # =========================================================
    def employee_id_exists(self, employee_id: str) -> bool:
        with self._lock:
            return self._employee_id_taken(employee_id)

    def count_employee_ids_with_prefix(
        self, prefix: str, *, company_id: UUID | None = None
    ) -> int:
        with self._lock:
            return sum(
                1
                for e in self._employees.values()
                if e.employee_id.startswith(prefix)
                and (company_id is None or e.company_id == company_id)
            )

    def _employee_id_taken(self, employee_id: str) -> bool:
        return any(
            e.employee_id == employee_id for e in self._employees.values()
        ) or any(u.employee_id == employee_id for u in self._users.values())

    # =========================================================
    # AccountRepository
    # =========================================================
    def create_account(
        self,
        *,
        user: User,
        employee: Employee,
        company: Company | None = None,
        only_if_no_companies: bool = False,
    ) -> None:
        with self._lock:
            if only_if_no_companies and self._companies:
                raise RegistrationClosedError()

            # 1) Validar todas las unicidades antes de escribir nada.
            if company is not None:
                if any(c.name == company.name for c in self._companies.values()):
                    raise DuplicateKeyError("company_name")
                if any(c.code == company.code for c in self._companies.values()):
                    raise DuplicateKeyError("company_code")
            email = normalize_email(user.email)
            if any(normalize_email(u.email) == email for u in self._users.values()):
                raise DuplicateKeyError("email")
            if self._employee_id_taken(employee.employee_id):
                raise DuplicateKeyError("employee_id")

            # 2) Escribir.
            if company is not None:
                self._companies[company.id] = company
            self._users[user.id] = user
            self._employees[employee.id] = employee

    # =========================================================
    # RefreshTokenRepository
    # =========================================================
    def create_refresh_token(self, token: RefreshToken) -> None:
        with self._lock:
            if token.token in self._refresh_tokens:
                raise DuplicateKeyError("token")
            self._refresh_tokens[token.token] = token

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]:
        with self._lock:
            return self._refresh_tokens.get(token)

    def delete_refresh_token(self, token: str) -> bool:
        with self._lock:
            return self._refresh_tokens.pop(token, None) is not None

    def delete_user_refresh_tokens(self, user_id: UUID) -> int:
        with self._lock:
            doomed = [t for t, r in self._refresh_tokens.items() if r.user_id == user_id]
            for t in doomed:
                del self._refresh_tokens[t]
            return len(doomed)

    # =========================================================
    # PasswordResetTokenRepository
    # =========================================================
    def create_reset_token(self, token: PasswordResetToken) -> None:
        with self._lock:
            if token.token in self._reset_tokens:
                raise DuplicateKeyError("token")
            self._reset_tokens[token.token] = token

    def get_reset_token(self, token: str) -> Optional[PasswordResetToken]:
        with self._lock:
            return self._reset_tokens.get(token)

    def delete_reset_token(self, token: str) -> bool:
        with self._lock:
            return self._reset_tokens.pop(token, None) is not None
