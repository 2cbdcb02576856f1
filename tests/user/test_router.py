"""Tests for user domain router (admin user management)."""

import uuid
from datetime import timedelta

import anyio
import pytest
from fastapi.testclient import TestClient

from app.core.settings import Settings
from app.core.tokens import TokenSigner
from app.user.models import Role, UserStatus
from app.user.schemas import UserCreate
from app.user.service import UsersService


def _token(settings: Settings, role: Role) -> str:
    async def _sign() -> str:
        return await TokenSigner().sign(
            {
                "id": str(uuid.uuid4()),
                "role": role.value,
                "sessionId": str(uuid.uuid4()),
            },
            secret=settings.auth_jwt_secret,
            expires_in=timedelta(minutes=5),
        )

    return anyio.run(_sign)


def _create(users_service: UsersService, **fields):
    return anyio.run(users_service.create, UserCreate(**fields))


@pytest.fixture
def admin_headers(settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token(settings, Role.admin)}"}


# --- Access control ---


def test_users_requires_token(client: TestClient):
    response = client.get("/api/users")

    assert response.status_code == 401


@pytest.mark.parametrize(
    "role", [Role.user, Role.patient, Role.doctor, Role.moderator]
)
def test_users_requires_admin_role(
    client: TestClient, settings: Settings, role: Role
):
    response = client.get(
        "/api/users", headers={"Authorization": f"Bearer {_token(settings, role)}"}
    )

    assert response.status_code == 403
    assert response.json()["type"] == "insufficient_role"


# --- GET /users ---


def test_list_users(client: TestClient, users_service: UsersService, admin_headers):
    for i in range(3):
        _create(users_service, email=f"u{i}@x.com", password="secret1")

    response = client.get("/api/users", params={"limit": 2}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert [u["email"] for u in data] == ["u0@x.com", "u1@x.com"]
    assert all("password" not in u for u in data)


def test_list_users_offset(
    client: TestClient, users_service: UsersService, admin_headers
):
    for i in range(3):
        _create(users_service, email=f"u{i}@x.com")

    response = client.get("/api/users", params={"offset": 2}, headers=admin_headers)

    assert [u["email"] for u in response.json()] == ["u2@x.com"]


def test_list_users_limit_bounds(client: TestClient, admin_headers):
    response = client.get("/api/users", params={"limit": 0}, headers=admin_headers)

    assert response.status_code == 422
    assert "limit" in response.json()["errors"]


# --- POST /users ---


def test_create_user(client: TestClient, users_service: UsersService, admin_headers):
    response = client.post(
        "/api/users",
        json={
            "email": "Doc@X.com",
            "password": "secret1",
            "first_name": "Doc",
            "role": "doctor",
            "status": "active",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "doc@x.com"
    assert data["role"] == "doctor"
    assert data["status"] == "active"
    assert data["created_at"].endswith("Z")

    stored = anyio.run(users_service.find_by_email, "doc@x.com")
    assert stored.password.startswith("$2")


def test_create_user_duplicate_email(
    client: TestClient, users_service: UsersService, admin_headers
):
    _create(users_service, email="a@x.com")

    response = client.post(
        "/api/users", json={"email": "a@x.com"}, headers=admin_headers
    )

    assert response.status_code == 422
    assert response.json()["errors"] == {"email": "emailAlreadyExists"}


# --- GET /users/{id} ---


def test_get_user(client: TestClient, users_service: UsersService, admin_headers):
    user = _create(users_service, email="a@x.com")

    response = client.get(f"/api/users/{user.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["id"] == str(user.id)


def test_get_user_not_found(client: TestClient, admin_headers):
    response = client.get(f"/api/users/{uuid.uuid4()}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {
        "type": "user_not_found",
        "message": "User not found",
        "errors": {"user": "notFound"},
    }


# --- PATCH /users/{id} ---


def test_update_user(client: TestClient, users_service: UsersService, admin_headers):
    user = _create(users_service, email="a@x.com")
    assert user.status == UserStatus.inactive

    response = client.patch(
        f"/api/users/{user.id}",
        json={"status": "active", "role": "moderator"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "active"
    assert response.json()["role"] == "moderator"
    assert response.json()["email"] == "a@x.com"


@pytest.mark.parametrize("field", ["status", "role", "provider"])
def test_update_user_rejects_null_enum(
    client: TestClient, users_service: UsersService, admin_headers, field: str
):
    user = _create(users_service, email="a@x.com")

    response = client.patch(
        f"/api/users/{user.id}", json={field: None}, headers=admin_headers
    )

    assert response.status_code == 422
    assert list(response.json()["errors"]) == [field]

def test_update_user_not_found(client: TestClient, admin_headers):
    response = client.patch(
        f"/api/users/{uuid.uuid4()}", json={"first_name": "X"}, headers=admin_headers
    )

    assert response.status_code == 404


# --- DELETE /users/{id} ---


def test_delete_user(client: TestClient, users_service: UsersService, admin_headers):
    user = _create(users_service, email="a@x.com")

    response = client.delete(f"/api/users/{user.id}", headers=admin_headers)
    assert response.status_code == 204

    response = client.get(f"/api/users/{user.id}", headers=admin_headers)
    assert response.status_code == 404
