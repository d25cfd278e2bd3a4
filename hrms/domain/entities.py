"""
CRC — domain/entities.py

Name
- Domain Entities (Company, Employee, RefreshToken, PasswordResetToken)

Responsibilities
- Represent the identity-related records owned by this core.
- Keep business "shapes" independent from infrastructure (DB, HTTP).

Collaborators
- identity.users.User (login account)
- domain.repositories (ports that persist these entities)
- application.usecases (create/consume them)

Constraints
- Pure data: no SQL, no FastAPI, no psycopg.
- Company / Employee are created at registration and never deleted here.
- Tokens are plain records; validity checks live in the use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


@dataclass(frozen=True, slots=True)
class Company:
    """R: Tenant. `code` is the namespace prefix of every employee id."""

    id: UUID
    name: str
    code: str
    logo: str | None = None
    created_at: datetime | None = None

    def to_public_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "code": self.code,
            "logo": self.logo,
        }


@dataclass(frozen=True, slots=True)
class Employee:
    """R: HR record paired 1:1 with a User through employee_id."""

    id: UUID
    employee_id: str
    user_id: UUID
    email: str
    first_name: str
    last_name: str
    department: str
    position: str
    hire_date: datetime
    company_id: UUID
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    salary: Decimal = Decimal("0")
    phone: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshToken:
    """R: Server-side record that makes a refresh JWT honourable."""

    token: str
    user_id: UUID
    expires_at: datetime
    created_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True, slots=True)
class PasswordResetToken:
    """R: One-time token sent by email; `email` is a snapshot at issuance."""

    token: str
    user_id: UUID
    email: str
    expires_at: datetime
    created_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
