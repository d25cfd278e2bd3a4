"""
Name: In-Memory Identity Store Tests

Responsibilities:
  - Uniqueness enforcement (email, employee_id, company name/code, tokens)
  - All-or-nothing account writes
  - Login ID lookup precedence and tenant-scoped listing
  - First-company gate checked under the store lock
  - Case-insensitive email matching
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from hrms.crosscutting.exceptions import DuplicateKeyError, RegistrationClosedError
from hrms.domain.entities import PasswordResetToken, RefreshToken

pytestmark = pytest.mark.unit

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def test_duplicate_email_is_rejected(store, seed_user):
    seed_user(email="jane@acme.com")

    with pytest.raises(DuplicateKeyError) as exc_info:
        seed_user(email="jane@acme.com")
    assert exc_info.value.field == "email"


def test_duplicate_employee_id_is_rejected(store, seed_user):
    seed_user(email="a@acme.com", employee_id="ACJADO20250001")

    with pytest.raises(DuplicateKeyError) as exc_info:
        seed_user(email="b@acme.com", employee_id="ACJADO20250001")
    assert exc_info.value.field == "employee_id"


def test_duplicate_company_fields_are_rejected(store, seed_user, make_company):
    seed_user(email="a@acme.com", company=make_company("Acme Corp", "AC"), new_company=True)

    with pytest.raises(DuplicateKeyError) as by_name:
        seed_user(
            email="b@acme.com", company=make_company("Acme Corp", "ZZ"), new_company=True
        )
    with pytest.raises(DuplicateKeyError) as by_code:
        seed_user(
            email="c@acme.com", company=make_company("Other", "AC"), new_company=True
        )

    assert by_name.value.field == "company_name"
    assert by_code.value.field == "company_code"


def test_failed_account_write_leaves_nothing_behind(store, seed_user, make_company):
    seed_user(email="jane@acme.com")

    with pytest.raises(DuplicateKeyError):
        seed_user(
            email="jane@acme.com",
            company=make_company("Globex", "GL"),
            new_company=True,
            employee_id="GLHASC20250001",
        )

    assert store.has_companies() is False
    assert store.employee_id_exists("GLHASC20250001") is False


def test_login_id_prefers_email_match(store, seed_user):
    by_employee_id = seed_user(email="someone@acme.com", employee_id="jane@acme.com")
    by_email = seed_user(email="jane@acme.com", employee_id="ACJADO20250001")

    assert store.get_user_by_login_id("jane@acme.com").id == by_email.id
    assert store.get_user_by_login_id("ACJADO20250001").id == by_email.id
    assert by_employee_id.id != by_email.id


def test_list_users_filters_by_company(store, seed_user, make_company):
    acme = make_company("Acme Corp", "AC")
    seed_user(email="a@acme.com", company=acme, new_company=True)
    seed_user(email="b@acme.com", company=acme)
    seed_user(email="x@nowhere.com")

    assert {u.email for u in store.list_users(company_id=acme.id)} == {
        "a@acme.com",
        "b@acme.com",
    }
    assert len(store.list_users()) == 3


def test_count_employee_ids_with_prefix(store, seed_user, make_company):
    acme = make_company("Acme Corp", "AC")
    seed_user(email="a@acme.com", company=acme, new_company=True, employee_id="ACJADO20250001")
    seed_user(email="b@acme.com", company=acme, employee_id="ACJADO20250002")
    seed_user(email="c@acme.com", company=acme, employee_id="ACBOSM20250001")

    assert store.count_employee_ids_with_prefix("ACJADO2025") == 2
    assert store.count_employee_ids_with_prefix("ACJADO2025", company_id=uuid4()) == 0


def test_update_password(store, seed_user):
    user = seed_user(email="jane@acme.com")

    assert store.update_user_password(user.id, "new-hash") is True
    assert store.get_user_by_id(user.id).password_hash == "new-hash"
    assert store.update_user_password(uuid4(), "new-hash") is False


def test_refresh_token_lifecycle(store):
    user_id = uuid4()
    for token in ("t1", "t2"):
        store.create_refresh_token(
            RefreshToken(token=token, user_id=user_id, expires_at=NOW + timedelta(days=7))
        )

    with pytest.raises(DuplicateKeyError):
        store.create_refresh_token(
            RefreshToken(token="t1", user_id=user_id, expires_at=NOW)
        )

    assert store.delete_refresh_token("t1") is True
    assert store.delete_refresh_token("t1") is False
    assert store.delete_user_refresh_tokens(user_id) == 1
    assert store.get_refresh_token("t2") is None


def test_reset_token_lifecycle(store):
    token = PasswordResetToken(
        token="abc", user_id=uuid4(), email="jane@acme.com", expires_at=NOW
    )
    store.create_reset_token(token)

    assert store.get_reset_token("abc") == token
    assert store.delete_reset_token("abc") is True
    assert store.get_reset_token("abc") is None


def test_first_company_gate_rejects_when_a_company_exists(store, seed_user, make_company):
    seed_user(email="jane@acme.com", company=make_company("Acme Corp", "AC"), new_company=True)

    with pytest.raises(RegistrationClosedError):
        store.create_account(
            user=MagicMock(),
            employee=MagicMock(),
            company=make_company("Globex", "GL"),
            only_if_no_companies=True,
        )
    assert store.get_company_by_name("Globex") is None


def test_email_matching_ignores_case(store, seed_user):
    user = seed_user(email="jane@acme.com", employee_id="ACJADO20250001")

    assert store.get_user_by_email("  Jane@ACME.com").id == user.id
    assert store.get_user_by_login_id("JANE@acme.com").id == user.id
    with pytest.raises(DuplicateKeyError) as exc_info:
        seed_user(email="Jane@Acme.COM")
    assert exc_info.value.field == "email"
