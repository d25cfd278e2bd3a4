"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for identity data (ports).
- Keep the application layer independent from PostgreSQL / in-memory storage.
- Enable straightforward unit testing (in-memory store, mocks).

Collaborators
- identity.users.User
- domain.entities: Company, Employee, RefreshToken, PasswordResetToken
- infrastructure.repositories: postgres/*, in_memory/identity_store.py

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Lookups return None when the record does not exist (never raise for "not found").
- Unique violations surface as crosscutting.exceptions.DuplicateKeyError(field).

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
"""

from typing import List, Optional, Protocol
from uuid import UUID

from ..identity.users import User
from .entities import Company, Employee, PasswordResetToken, RefreshToken


class UserRepository(Protocol):
    """R: Interface for login accounts."""

    def get_user_by_id(self, user_id: UUID) -> Optional[User]: ...

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def get_user_by_login_id(self, login_id: str) -> Optional[User]:
        """
        R: First user whose email OR employee_id equals login_id.

        Email match wins when both exist.
        """
        ...

    def list_users(self, *, company_id: UUID | None = None) -> List[User]:
        """R: Users newest-first by created_at; company_id=None => all tenants."""
        ...

    def update_user_password(self, user_id: UUID, password_hash: str) -> bool:
        """R: Overwrite the hash. Returns False when the user does not exist."""
        ...


class CompanyRepository(Protocol):
    """R: Interface for tenants."""

    def has_companies(self) -> bool: ...

    def get_company_by_id(self, company_id: UUID) -> Optional[Company]: ...

    def get_company_by_name(self, name: str) -> Optional[Company]: ...

    def company_code_exists(self, code: str) -> bool: ...


class EmployeeRepository(Protocol):
    """R: Interface for HR employee records (identifier queries only)."""

    def employee_id_exists(self, employee_id: str) -> bool: ...

    def count_employee_ids_with_prefix(
        self, prefix: str, *, company_id: UUID | None = None
    ) -> int:
        """R: Number of employee ids starting with prefix (optionally per tenant)."""
        ...


class AccountRepository(Protocol):
    """
    R: Atomic account provisioning.

    Writes the (optional) new Company, the User and the Employee in ONE
    transaction: either all three records exist afterwards or none does.
    """

    def create_account(
        self,
        *,
        user: User,
        employee: Employee,
        company: Company | None = None,
        only_if_no_companies: bool = False,
    ) -> None:
        """
        only_if_no_companies: the "no company exists yet" check runs inside
        the same atomic write, so concurrent first registrations cannot both
        commit.

        Raises:
            DuplicateKeyError: field in {email, employee_id, company_code, company_name}
            RegistrationClosedError: only_if_no_companies and a company exists
        """
        ...


class RefreshTokenRepository(Protocol):
    """R: Interface for server-side refresh token records (multi-device)."""

    def create_refresh_token(self, token: RefreshToken) -> None: ...

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]: ...

    def delete_refresh_token(self, token: str) -> bool:
        """R: Returns False when no record matched (not an error)."""
        ...

    def delete_user_refresh_tokens(self, user_id: UUID) -> int:
        """R: Revoke every session of a user. Returns deleted count."""
        ...


class PasswordResetTokenRepository(Protocol):
    """R: Interface for one-time password reset tokens."""

    def create_reset_token(self, token: PasswordResetToken) -> None: ...

    def get_reset_token(self, token: str) -> Optional[PasswordResetToken]: ...

    def delete_reset_token(self, token: str) -> bool: ...
