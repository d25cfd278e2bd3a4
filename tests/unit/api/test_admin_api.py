"""
Name: Admin API Tests

Responsibilities:
  - Role gate (401 without token, 403 for non-admins)
  - Tenant scope on listing, credential dispatch and password updates
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from hrms.api.main import create_app
from hrms.container import Container
from hrms.domain.entities import Company, Employee
from hrms.identity.passwords import hash_password
from hrms.identity.users import User, UserRole

pytestmark = pytest.mark.unit


@pytest.fixture
def container(settings, notifier):
    return Container.build(settings, notifier=notifier)


@pytest.fixture
def client(settings, container):
    with TestClient(create_app(settings, container=container)) as test_client:
        yield test_client


def _add_user(container, *, email, role, company, new_company=False, employee_id):
    now = datetime.now(timezone.utc)
    user = User(
        id=uuid4(),
        email=email,
        password_hash=hash_password("password123"),
        first_name=email.split("@")[0].title(),
        last_name="Tester",
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
        first_name=user.first_name,
        last_name=user.last_name,
        department="General",
        position="Staff",
        hire_date=now,
        company_id=company.id,
        salary=Decimal("0"),
    )
    container.accounts.create_account(
        user=user, employee=employee, company=company if new_company else None
    )
    return user


@pytest.fixture
def world(container):
    acme = Company(id=uuid4(), name="Acme Corp", code="AC")
    globex = Company(id=uuid4(), name="Globex", code="GL")
    return {
        "admin": _add_user(
            container,
            email="jane@acme.com",
            role=UserRole.ADMIN,
            company=acme,
            new_company=True,
            employee_id="ACJATE20250001",
        ),
        "hr": _add_user(
            container,
            email="holly@acme.com",
            role=UserRole.HR,
            company=acme,
            employee_id="ACHOTE20250001",
        ),
        "outsider": _add_user(
            container,
            email="hank@globex.com",
            role=UserRole.EMPLOYEE,
            company=globex,
            new_company=True,
            employee_id="GLHATE20250001",
        ),
    }


def _login(client, login_id) -> dict:
    response = client.post(
        "/api/auth/login", json={"loginId": login_id, "password": "password123"}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['data']['accessToken']}"}


def test_list_users_requires_token(client):
    assert client.get("/api/admin/users").status_code == 401


def test_list_users_requires_admin_role(client, world):
    response = client.get("/api/admin/users", headers=_login(client, "holly@acme.com"))

    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permissions"


def test_list_users_scoped_to_company(client, world):
    response = client.get("/api/admin/users", headers=_login(client, "ACJATE20250001"))

    assert response.status_code == 200
    emails = {u["email"] for u in response.json()["data"]}
    assert emails == {"jane@acme.com", "holly@acme.com"}
    assert all("passwordHash" not in u for u in response.json()["data"])


def test_send_credentials(client, world, notifier):
    target = world["hr"]

    response = client.post(
        f"/api/admin/users/{target.id}/send-credentials",
        headers=_login(client, "jane@acme.com"),
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Login credentials sent successfully via email"
    assert notifier.credential_emails[-1]["login_id"] == "ACHOTE20250001"


def test_send_credentials_cross_tenant_forbidden(client, world, notifier):
    response = client.post(
        f"/api/admin/users/{world['outsider'].id}/send-credentials",
        headers=_login(client, "jane@acme.com"),
    )

    assert response.status_code == 403
    assert notifier.credential_emails == []


def test_send_credentials_unknown_user(client, world):
    response = client.post(
        f"/api/admin/users/{uuid4()}/send-credentials",
        headers=_login(client, "jane@acme.com"),
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_update_user_password(client, world):
    headers = _login(client, "jane@acme.com")

    response = client.put(
        f"/api/admin/users/{world['hr'].id}/password",
        json={"password": "brand-new-pass"},
        headers=headers,
    )

    assert response.status_code == 200
    relogin = client.post(
        "/api/auth/login",
        json={"loginId": "holly@acme.com", "password": "brand-new-pass"},
    )
    assert relogin.status_code == 200


def test_update_user_password_cross_tenant(client, world):
    response = client.put(
        f"/api/admin/users/{world['outsider'].id}/password",
        json={"password": "brand-new-pass"},
        headers=_login(client, "jane@acme.com"),
    )

    assert response.status_code == 403


def test_update_user_password_too_short(client, world):
    response = client.put(
        f"/api/admin/users/{world['hr'].id}/password",
        json={"password": "short"},
        headers=_login(client, "jane@acme.com"),
    )

    assert response.status_code == 400


def test_invalid_user_id_path_is_400(client, world):
    response = client.put(
        "/api/admin/users/not-a-uuid/password",
        json={"password": "brand-new-pass"},
        headers=_login(client, "jane@acme.com"),
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
