"""
Name: Postgres Repository Tests

Responsibilities:
  - Row mapping to domain entities
  - UniqueViolation -> DuplicateKeyError translation by constraint name
  - Other driver errors -> DatabaseError
  - Account creation runs in a single transaction
  - First-company gate is re-checked under a table lock inside that transaction

Notes:
  - The pool is a MagicMock; no SQL reaches a server
"""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from psycopg import errors as pg_errors

from hrms.crosscutting.exceptions import (
    DatabaseError,
    DuplicateKeyError,
    RegistrationClosedError,
)
from hrms.domain.entities import Company, Employee
from hrms.identity.users import User, UserRole
from hrms.infrastructure.db.errors import duplicate_key_from
from hrms.infrastructure.repositories.postgres import (
    PostgresAccountRepository,
    PostgresCompanyRepository,
    PostgresEmployeeRepository,
    PostgresRefreshTokenRepository,
    PostgresUserRepository,
)

pytestmark = pytest.mark.unit

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def _pool_with(conn: MagicMock) -> MagicMock:
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    return pool


def _user_row(role="admin"):
    return (
        uuid4(),
        "jane@acme.com",
        "$argon2id$hash",
        "Jane",
        "Doe",
        role,
        uuid4(),
        "ACJADO20250001",
        None,
        None,
        "General",
        "Owner",
        NOW,
        NOW,
    )


@pytest.mark.parametrize(
    "constraint, field",
    [
        ("uq_users_email", "email"),
        ("uq_users_email_lower", "email"),
        ("uq_users_employee_id", "employee_id"),
        ("uq_employees_employee_id", "employee_id"),
        ("uq_companies_code", "company_code"),
        ("uq_companies_name", "company_name"),
        ("uq_refresh_tokens_token", "token"),
        ("something_else", "unknown"),
    ],
)
def test_duplicate_key_from_constraint_name(constraint, field):
    exc = SimpleNamespace(diag=SimpleNamespace(constraint_name=constraint))

    assert duplicate_key_from(exc).field == field


def test_get_user_by_login_id_maps_row():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = _user_row()
    repo = PostgresUserRepository(_pool_with(conn))

    user = repo.get_user_by_login_id("ACJADO20250001")

    assert user.role == UserRole.ADMIN
    assert user.employee_id == "ACJADO20250001"
    _, params = conn.execute.call_args.args
    assert params == ("acjado20250001", "ACJADO20250001", "acjado20250001")


def test_missing_user_returns_none():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = None

    assert PostgresUserRepository(_pool_with(conn)).get_user_by_id(uuid4()) is None


def test_unknown_role_is_database_error():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = _user_row(role="superuser")

    with pytest.raises(DatabaseError):
        PostgresUserRepository(_pool_with(conn)).get_user_by_email("jane@acme.com")


def test_update_password_uses_rowcount():
    conn = MagicMock()
    conn.execute.return_value.rowcount = 0

    assert PostgresUserRepository(_pool_with(conn)).update_user_password(uuid4(), "h") is False


def test_driver_error_becomes_database_error():
    conn = MagicMock()
    conn.execute.side_effect = RuntimeError("connection reset")

    with pytest.raises(DatabaseError) as exc_info:
        PostgresCompanyRepository(_pool_with(conn)).has_companies()
    assert not isinstance(exc_info.value, DuplicateKeyError)


def test_unique_violation_becomes_duplicate_key():
    conn = MagicMock()
    conn.execute.side_effect = pg_errors.UniqueViolation("duplicate key")

    with pytest.raises(DuplicateKeyError):
        PostgresRefreshTokenRepository(_pool_with(conn)).delete_refresh_token("t")


def test_employee_id_exists_checks_both_tables():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = (True,)

    assert PostgresEmployeeRepository(_pool_with(conn)).employee_id_exists("X") is True
    query, params = conn.execute.call_args.args
    assert "employees" in query and "users" in query
    assert params == ("X", "X")


def test_create_account_inserts_three_rows_in_one_transaction():
    conn = MagicMock()
    repo = PostgresAccountRepository(_pool_with(conn))
    company = Company(id=uuid4(), name="Acme Corp", code="AC", created_at=NOW)
    user = User(
        id=uuid4(),
        email="jane@acme.com",
        password_hash="h",
        first_name="Jane",
        last_name="Doe",
        role=UserRole.ADMIN,
        company_id=company.id,
        employee_id="ACJADO20250001",
        created_at=NOW,
        updated_at=NOW,
    )
    employee = Employee(
        id=uuid4(),
        employee_id="ACJADO20250001",
        user_id=user.id,
        email=user.email,
        first_name="Jane",
        last_name="Doe",
        department="General",
        position="Owner",
        hire_date=NOW,
        company_id=company.id,
        salary=Decimal("0"),
    )

    repo.create_account(user=user, employee=employee, company=company)

    conn.transaction.assert_called_once()
    tables = [c.args[0] for c in conn.execute.call_args_list]
    assert "companies" in tables[0]
    assert "users" in tables[1]
    assert "employees" in tables[2]


def test_create_account_duplicate_propagates_as_duplicate_key():
    conn = MagicMock()
    conn.execute.side_effect = pg_errors.UniqueViolation("duplicate key")
    repo = PostgresAccountRepository(_pool_with(conn))

    with pytest.raises(DuplicateKeyError):
        repo.create_account(user=MagicMock(), employee=MagicMock(), company=None)


def test_get_user_by_email_is_case_insensitive():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = None

    PostgresUserRepository(_pool_with(conn)).get_user_by_email("  Jane@ACME.com ")

    query, params = conn.execute.call_args.args
    assert "lower(email) = %s" in query
    assert params == ("jane@acme.com",)


def test_create_account_gate_locks_companies_and_rejects_when_taken():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = (True,)
    repo = PostgresAccountRepository(_pool_with(conn))

    with pytest.raises(RegistrationClosedError):
        repo.create_account(
            user=MagicMock(),
            employee=MagicMock(),
            company=MagicMock(),
            only_if_no_companies=True,
        )

    statements = [c.args[0] for c in conn.execute.call_args_list]
    assert statements[0] == "LOCK TABLE companies IN EXCLUSIVE MODE"
    assert "EXISTS" in statements[1]
    assert not any("INSERT" in s for s in statements)


def test_create_account_gate_open_inserts_after_lock():
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = (False,)
    repo = PostgresAccountRepository(_pool_with(conn))

    repo.create_account(
        user=MagicMock(),
        employee=MagicMock(),
        company=MagicMock(),
        only_if_no_companies=True,
    )

    statements = [c.args[0] for c in conn.execute.call_args_list]
    assert statements[0].startswith("LOCK TABLE companies")
    assert ["companies" in s for s in statements[2:]] == [True, False, False]
    assert "INSERT INTO users" in statements[3]
    assert "INSERT INTO employees" in statements[4]
