"""
Name: Initial Admin Registration Tests

Responsibilities:
  - Bootstrap gate (only while no company exists)
  - Input validation and email uniqueness
  - Company + user + employee written together with generated identifiers
  - Retry on identifier collisions at write time
  - Concurrent first registrations: exactly one wins
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from hrms.application.usecases.credentials import (
    CredentialErrorCode,
    RegisterInitialAdminInput,
    RegisterInitialAdminUseCase,
    SessionTokenIssuer,
    split_full_name,
)
from hrms.application.usecases.credentials.register_initial_admin import (
    REGISTRATION_CLOSED_MESSAGE,
)
from hrms.crosscutting.exceptions import DuplicateKeyError, IdentifierGenerationError
from hrms.identity.identifiers import IdentifierGenerator
from hrms.identity.passwords import verify_password
from hrms.identity.users import UserRole

pytestmark = pytest.mark.unit

NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class CollidingAccounts:
    """Delegates to the store after raising the queued duplicate errors."""

    def __init__(self, store, fields):
        self._store = store
        self._fields = list(fields)
        self.calls = []

    def create_account(self, *, user, employee, company=None, **kwargs):
        self.calls.append(employee.employee_id)
        if self._fields:
            raise DuplicateKeyError(self._fields.pop(0))
        self._store.create_account(
            user=user, employee=employee, company=company, **kwargs
        )


def _use_case(store, codec, *, accounts=None, max_attempts=5):
    return RegisterInitialAdminUseCase(
        users=store,
        companies=store,
        accounts=accounts or store,
        identifiers=IdentifierGenerator(store, store, max_attempts=max_attempts),
        sessions=SessionTokenIssuer(codec, store),
        min_password_length=8,
        max_attempts=max_attempts,
        clock=lambda: NOW,
    )


def _input(**overrides):
    data = dict(
        company_name="Acme Corp",
        full_name="Jane Doe",
        email="jane@acme.com",
        password="password123",
        phone="555-0100",
    )
    data.update(overrides)
    return RegisterInitialAdminInput(**data)


def test_registers_company_admin_and_employee(store, codec):
    result = _use_case(store, codec).execute(_input())

    assert result.error is None
    user, company = result.user, result.company
    assert company.name == "Acme Corp"
    assert company.code == "AC"
    assert user.role == UserRole.ADMIN
    assert user.employee_id == "ACJADO20250001"
    assert user.company_id == company.id
    assert (user.first_name, user.last_name) == ("Jane", "Doe")
    assert (user.department, user.position) == ("General", "Owner")
    assert verify_password("password123", user.password_hash)

    assert store.employee_id_exists("ACJADO20250001")
    assert store.get_user_by_login_id("ACJADO20250001").id == user.id
    assert store.get_refresh_token(result.refresh_token).user_id == user.id
    assert codec.verify_access(result.access_token) == user.id


def test_second_registration_is_forbidden(store, codec):
    _use_case(store, codec).execute(_input())

    result = _use_case(store, codec).execute(
        _input(company_name="Globex", email="hank@globex.com")
    )

    assert result.error.code == CredentialErrorCode.FORBIDDEN
    assert result.error.message == REGISTRATION_CLOSED_MESSAGE


@pytest.mark.parametrize(
    "overrides, message_part",
    [
        ({"company_name": "A"}, "Company name"),
        ({"company_name": "   "}, "Company name"),
        ({"full_name": "J Doe"}, "First name and last name"),
        ({"full_name": ""}, "First name and last name"),
        ({"email": "  "}, "Email is required"),
        ({"password": "short"}, "at least 8 characters"),
    ],
)
def test_validation_errors(store, codec, overrides, message_part):
    result = _use_case(store, codec).execute(_input(**overrides))

    assert result.error.code == CredentialErrorCode.VALIDATION_ERROR
    assert message_part in result.error.message
    assert store.has_companies() is False


def test_single_word_name_is_duplicated(store, codec):
    result = _use_case(store, codec).execute(_input(full_name="Madonna"))

    assert (result.user.first_name, result.user.last_name) == ("Madonna", "Madonna")
    assert result.user.employee_id == "ACMAMA20250001"


def test_split_full_name():
    assert split_full_name("Jane van der Berg") == ("Jane", "van der Berg")
    assert split_full_name("Cher") == ("Cher", "Cher")
    assert split_full_name("") == ("", "")


def test_email_conflict_detected_before_write(store, codec, seed_user):
    seed_user(email="jane@acme.com")

    result = _use_case(store, codec).execute(_input())

    assert result.error.code == CredentialErrorCode.CONFLICT
    assert store.has_companies() is False


def test_email_conflict_at_write_time(store, codec):
    accounts = CollidingAccounts(store, ["email"])

    result = _use_case(store, codec, accounts=accounts).execute(_input())

    assert result.error.code == CredentialErrorCode.CONFLICT
    assert len(accounts.calls) == 1


def test_employee_id_collision_retries_with_next_serial(store, codec):
    accounts = CollidingAccounts(store, ["employee_id"])

    result = _use_case(store, codec, accounts=accounts).execute(_input())

    assert result.error is None
    assert accounts.calls == ["ACJADO20250001", "ACJADO20250002"]
    assert result.user.employee_id == "ACJADO20250002"


def test_company_code_collision_retries(store, codec):
    accounts = CollidingAccounts(store, ["company_code"])

    result = _use_case(store, codec, accounts=accounts).execute(_input())

    assert result.error is None
    assert len(accounts.calls) == 2


def test_unrelated_duplicate_is_raised(store, codec):
    accounts = CollidingAccounts(store, ["token"])

    with pytest.raises(DuplicateKeyError):
        _use_case(store, codec, accounts=accounts).execute(_input())


def test_retry_budget_is_bounded(store, codec):
    accounts = CollidingAccounts(store, ["employee_id"] * 10)

    with pytest.raises(IdentifierGenerationError):
        _use_case(store, codec, accounts=accounts, max_attempts=3).execute(_input())
    assert len(accounts.calls) == 3


def test_retry_rechecks_registration_gate(store, codec, make_company, seed_user):
    class RacingAccounts(CollidingAccounts):
        def create_account(self, *, user, employee, company=None, **kwargs):
            # Otro registro gana la carrera antes del reintento.
            seed_user(
                email="winner@globex.com",
                company=make_company("Globex", "GL"),
                new_company=True,
            )
            super().create_account(
                user=user, employee=employee, company=company, **kwargs
            )

    accounts = RacingAccounts(store, ["company_name"])

    result = _use_case(store, codec, accounts=accounts).execute(_input())

    assert result.error.code == CredentialErrorCode.FORBIDDEN
    assert len(accounts.calls) == 1


class BarrierCompanies:
    """Lets every caller pass has_companies() before any of them writes."""

    def __init__(self, store, parties):
        self._store = store
        self._barrier = threading.Barrier(parties, timeout=5)

    def has_companies(self):
        seen = self._store.has_companies()
        try:
            self._barrier.wait()
        except threading.BrokenBarrierError:
            pass
        return seen

    def __getattr__(self, name):
        return getattr(self._store, name)


def test_concurrent_first_registrations_only_one_wins(store, codec):
    use_case = RegisterInitialAdminUseCase(
        users=store,
        companies=BarrierCompanies(store, parties=2),
        accounts=store,
        identifiers=IdentifierGenerator(store, store),
        sessions=SessionTokenIssuer(codec, store),
        min_password_length=8,
        clock=lambda: NOW,
    )
    inputs = [
        _input(company_name="Acme Corp", email="jane@acme.com"),
        _input(company_name="Globex Inc", email="hank@globex.com"),
    ]

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(use_case.execute, inputs))

    winners = [r for r in results if r.error is None]
    losers = [r for r in results if r.error is not None]
    assert len(winners) == 1
    assert losers[0].error.code == CredentialErrorCode.FORBIDDEN
    assert losers[0].error.message == REGISTRATION_CLOSED_MESSAGE
    created = [
        store.get_company_by_name(name) for name in ("Acme Corp", "Globex Inc")
    ]
    assert sum(c is not None for c in created) == 1


def test_email_is_stored_lowercase(store, codec):
    result = _use_case(store, codec).execute(_input(email="  Jane@ACME.com "))

    assert result.user.email == "jane@acme.com"
    assert store.get_user_by_login_id("jane@acme.com").id == result.user.id


def test_email_conflict_ignores_case(store, codec, seed_user):
    seed_user(email="jane@acme.com")

    result = _use_case(store, codec).execute(_input(email="JANE@acme.com"))

    assert result.error.code == CredentialErrorCode.CONFLICT
