"""
Name: PostgreSQL Identity Repositories Integration Tests

Responsibilities:
  - Atomic company + user + employee write and its rollback
  - Unique constraint names surfacing as DuplicateKeyError.field
  - Login lookup, tenant listing and password update
  - Refresh / reset token persistence
  - First-company gate inside the account transaction
  - Case-insensitive email lookup

Notes:
  - Requires a running PostgreSQL 13+ (gen_random_uuid)
  - Mark with @pytest.mark.integration

Setup:
  RUN_INTEGRATION=1 DATABASE_URL=postgresql://... pytest tests/integration
"""

import os

import pytest

# Skip BEFORE importing hrms.* to avoid opening connections during collection
if os.getenv("RUN_INTEGRATION") != "1":
    pytest.skip(
        "Set RUN_INTEGRATION=1 to run integration tests", allow_module_level=True
    )

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

from hrms.crosscutting.exceptions import DuplicateKeyError, RegistrationClosedError
from hrms.domain.entities import Company, Employee, PasswordResetToken, RefreshToken
from hrms.identity.users import User, UserRole
from hrms.infrastructure.repositories.postgres import (
    PostgresAccountRepository,
    PostgresCompanyRepository,
    PostgresEmployeeRepository,
    PostgresPasswordResetTokenRepository,
    PostgresRefreshTokenRepository,
    PostgresUserRepository,
)

pytestmark = pytest.mark.integration


def _account(email, employee_id, company, role=UserRole.EMPLOYEE):
    now = datetime.now(timezone.utc)
    user = User(
        id=uuid4(),
        email=email,
        password_hash="argon2-hash",
        first_name="Jane",
        last_name="Doe",
        role=role,
        company_id=company.id,
        employee_id=employee_id,
        created_at=now,
        updated_at=now,
    )
    employee = Employee(
        id=uuid4(),
        employee_id=employee_id,
        user_id=user.id,
        email=email,
        first_name="Jane",
        last_name="Doe",
        department="Management",
        position="Owner",
        hire_date=now,
        company_id=company.id,
        salary=Decimal("0"),
    )
    return user, employee


@pytest.fixture
def acme():
    return Company(id=uuid4(), name="Acme Corp", code="AC")


@pytest.fixture
def repos(clean_db):
    return {
        "accounts": PostgresAccountRepository(clean_db),
        "users": PostgresUserRepository(clean_db),
        "companies": PostgresCompanyRepository(clean_db),
        "employees": PostgresEmployeeRepository(clean_db),
        "refresh": PostgresRefreshTokenRepository(clean_db),
        "reset": PostgresPasswordResetTokenRepository(clean_db),
    }


def test_create_account_with_company(repos, acme):
    user, employee = _account("jane@acme.com", "ACJADO20250001", acme, UserRole.ADMIN)

    assert repos["companies"].has_companies() is False
    repos["accounts"].create_account(user=user, employee=employee, company=acme)

    assert repos["companies"].has_companies() is True
    assert repos["companies"].company_code_exists("AC") is True
    assert repos["employees"].employee_id_exists("ACJADO20250001") is True
    assert repos["employees"].count_employee_ids_with_prefix("ACJADO2025") == 1

    by_id = repos["users"].get_user_by_login_id("ACJADO20250001")
    by_email = repos["users"].get_user_by_login_id("jane@acme.com")
    assert by_id.id == by_email.id == user.id
    assert by_id.role == UserRole.ADMIN


def test_duplicate_email_rolls_back_everything(repos, acme):
    user, employee = _account("jane@acme.com", "ACJADO20250001", acme)
    repos["accounts"].create_account(user=user, employee=employee, company=acme)

    globex = Company(id=uuid4(), name="Globex", code="GL")
    clash, clash_employee = _account("jane@acme.com", "GLJADO20250001", globex)

    with pytest.raises(DuplicateKeyError) as exc_info:
        repos["accounts"].create_account(
            user=clash, employee=clash_employee, company=globex
        )

    assert exc_info.value.field == "email"
    assert repos["companies"].company_code_exists("GL") is False
    assert repos["employees"].employee_id_exists("GLJADO20250001") is False


def test_duplicate_employee_id_is_reported(repos, acme):
    user, employee = _account("jane@acme.com", "ACJADO20250001", acme)
    repos["accounts"].create_account(user=user, employee=employee, company=acme)

    other, other_employee = _account("john@acme.com", "ACJADO20250001", acme)
    with pytest.raises(DuplicateKeyError) as exc_info:
        repos["accounts"].create_account(user=other, employee=other_employee)

    assert exc_info.value.field == "employee_id"


def test_list_users_and_update_password(repos, acme):
    jane, jane_employee = _account("jane@acme.com", "ACJADO20250001", acme)
    john, john_employee = _account("john@acme.com", "ACJODO20250001", acme)
    repos["accounts"].create_account(user=jane, employee=jane_employee, company=acme)
    repos["accounts"].create_account(user=john, employee=john_employee)

    listed = repos["users"].list_users(company_id=acme.id)
    assert {u.email for u in listed} == {"jane@acme.com", "john@acme.com"}
    assert repos["users"].list_users(company_id=uuid4()) == []

    assert repos["users"].update_user_password(john.id, "new-hash") is True
    assert repos["users"].get_user_by_id(john.id).password_hash == "new-hash"
    assert repos["users"].update_user_password(uuid4(), "new-hash") is False


def test_refresh_and_reset_tokens(repos, acme):
    user, employee = _account("jane@acme.com", "ACJADO20250001", acme)
    repos["accounts"].create_account(user=user, employee=employee, company=acme)
    expires = datetime.now(timezone.utc) + timedelta(days=7)

    repos["refresh"].create_refresh_token(
        RefreshToken(token="r1", user_id=user.id, expires_at=expires)
    )
    repos["refresh"].create_refresh_token(
        RefreshToken(token="r2", user_id=user.id, expires_at=expires)
    )
    assert repos["refresh"].get_refresh_token("r1").user_id == user.id
    assert repos["refresh"].delete_refresh_token("r1") is True
    assert repos["refresh"].get_refresh_token("r1") is None
    assert repos["refresh"].delete_user_refresh_tokens(user.id) == 1

    repos["reset"].create_reset_token(
        PasswordResetToken(
            token="reset-1", user_id=user.id, email=user.email, expires_at=expires
        )
    )
    stored = repos["reset"].get_reset_token("reset-1")
    assert stored.email == "jane@acme.com"
    assert repos["reset"].delete_reset_token("reset-1") is True
    assert repos["reset"].get_reset_token("reset-1") is None


def test_first_company_gate_inside_transaction(repos, acme):
    user, employee = _account("jane@acme.com", "ACJADO20250001", acme, UserRole.ADMIN)
    repos["accounts"].create_account(
        user=user, employee=employee, company=acme, only_if_no_companies=True
    )

    globex = Company(id=uuid4(), name="Globex", code="GL")
    late, late_employee = _account("hank@globex.com", "GLHADO20250001", globex)
    with pytest.raises(RegistrationClosedError):
        repos["accounts"].create_account(
            user=late, employee=late_employee, company=globex, only_if_no_companies=True
        )

    assert repos["companies"].company_code_exists("GL") is False
    assert repos["users"].get_user_by_email("hank@globex.com") is None


def test_email_lookup_ignores_case(repos, acme):
    user, employee = _account("jane@acme.com", "ACJADO20250001", acme)
    repos["accounts"].create_account(user=user, employee=employee, company=acme)

    assert repos["users"].get_user_by_email("Jane@ACME.com").id == user.id
    assert repos["users"].get_user_by_login_id("JANE@acme.com").id == user.id

    clash, clash_employee = _account("JANE@acme.com", "ACJADO20250002", acme)
    with pytest.raises(DuplicateKeyError) as exc_info:
        repos["accounts"].create_account(user=clash, employee=clash_employee)
    assert exc_info.value.field == "email"
