"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, no .env file)
  - Provide an in-memory identity store and a recording notifier
  - Provide factories to seed companies/users/employees

Collaborators:
  - pytest: Test framework
  - hrms.infrastructure.repositories.in_memory: InMemoryIdentityStore
  - hrms.container: Container

Notes:
  - Use @pytest.fixture(scope="function") for per-test isolation
  - Argon2 hashing is real (not mocked); passwords are short-lived test values
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List
from uuid import UUID, uuid4

import pytest

os.environ.setdefault("APP_ENV", "test")

from hrms.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from hrms.crosscutting.config import Settings  # noqa: E402
from hrms.domain.entities import Company, Employee, EmployeeStatus  # noqa: E402
from hrms.identity.passwords import hash_password  # noqa: E402
from hrms.identity.tokens import TokenCodec  # noqa: E402
from hrms.identity.users import User, UserRole  # noqa: E402
from hrms.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryIdentityStore,
)

TEST_ACCESS_SECRET = "test-access-secret"
TEST_REFRESH_SECRET = "test-refresh-secret"
DEFAULT_PASSWORD = "password123"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Fakes
# ============================================================================


@dataclass
class RecordingNotifier:
    """Notifier fake: guarda cada despacho para assertions."""

    credential_emails: List[dict] = field(default_factory=list)
    reset_emails: List[dict] = field(default_factory=list)
    fail: bool = False

    def send_credential_email(self, email, login_id, message, first_name, reset_token):
        if self.fail:
            raise RuntimeError("smtp down")
        self.credential_emails.append(
            {
                "email": email,
                "login_id": login_id,
                "message": message,
                "first_name": first_name,
                "reset_token": reset_token,
            }
        )

    def send_password_reset_email(self, email, first_name, reset_token):
        if self.fail:
            raise RuntimeError("smtp down")
        self.reset_emails.append(
            {"email": email, "first_name": first_name, "reset_token": reset_token}
        )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        jwt_secret=TEST_ACCESS_SECRET,
        jwt_refresh_secret=TEST_REFRESH_SECRET,
        email_enabled=False,
    )


@pytest.fixture
def store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(
        access_secret=TEST_ACCESS_SECRET, refresh_secret=TEST_REFRESH_SECRET
    )


def _make_company(name: str = "Acme Corp", code: str = "AC") -> Company:
    return Company(
        id=uuid4(), name=name, code=code, created_at=datetime.now(timezone.utc)
    )


def _seed_user(
    store: InMemoryIdentityStore,
    *,
    email: str,
    password: str = DEFAULT_PASSWORD,
    role: UserRole = UserRole.EMPLOYEE,
    company: Company | None = None,
    new_company: bool = False,
    employee_id: str | None = None,
    first_name: str = "Test",
    last_name: str = "User",
) -> User:
    """Persiste user + employee (y la empresa si new_company) en el store."""
    now = datetime.now(timezone.utc)
    company_id: UUID | None = company.id if company else None
    employee_id = employee_id or f"EMP{uuid4().hex[:8].upper()}"

    user = User(
        id=uuid4(),
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        company_id=company_id,
        employee_id=employee_id,
        created_at=now,
        updated_at=now,
    )
    employee = Employee(
        id=uuid4(),
        employee_id=employee_id,
        user_id=user.id,
        email=email,
        first_name=first_name,
        last_name=last_name,
        department="General",
        position="Staff",
        hire_date=now,
        company_id=company_id,
        status=EmployeeStatus.ACTIVE,
        salary=Decimal("0"),
    )
    store.create_account(
        user=user, employee=employee, company=company if new_company else None
    )
    return user


@pytest.fixture
def make_company():
    return _make_company


@pytest.fixture
def seed_user(store):
    """seed_user(email=..., role=..., company=..., new_company=...) -> User"""

    def _seed(**kwargs) -> User:
        return _seed_user(store, **kwargs)

    return _seed
