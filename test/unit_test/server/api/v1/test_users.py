import pytest
from httpx import AsyncClient

from cleanstation.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

USERS_URL = "/api/v1/admin/users"


def _new_user(**overrides):
    payload = {
        "username": "jdoe",
        "email": "jdoe@cleanstation.test",
        "fullName": "Jane Doe",
        "initials": "JD",
        "role": "ASSEMBLER",
        "password": "s3cret-pass",
    }
    payload.update(overrides)
    return payload


async def test_list_users(client: AsyncClient, auth_headers):
    """Admins list every account sorted by username."""
    response = await client.get(USERS_URL, headers=auth_headers[UserRole.ADMIN])
    assert response.status_code == 200
    usernames = [u["username"] for u in response.json()["data"]]
    assert usernames == sorted(role.value.lower() for role in UserRole)


async def test_list_users_by_role(client: AsyncClient, auth_headers):
    response = await client.get(USERS_URL, params={"role": "QC_PERSON"}, headers=auth_headers[UserRole.ADMIN])
    assert [u["username"] for u in response.json()["data"]] == ["qc_person"]


@pytest.mark.parametrize("role", [UserRole.PRODUCTION_COORDINATOR, UserRole.ASSEMBLER])
async def test_non_admin_forbidden(client: AsyncClient, auth_headers, role):
    response = await client.get(USERS_URL, headers=auth_headers[role])
    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "FORBIDDEN"
    assert error["details"]["required_roles"] == ["ADMIN"]


async def test_create_user_and_login(client: AsyncClient, auth_headers):
    """A created user can log in with the given password."""
    response = await client.post(USERS_URL, json=_new_user(), headers=auth_headers[UserRole.ADMIN])
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["username"] == "jdoe"
    assert data["role"] == "ASSEMBLER"
    assert data["is_active"] is True

    login = await client.post("/api/auth/login", json={"username": "jdoe", "password": "s3cret-pass"})
    assert login.status_code == 200


async def test_create_user_duplicate_username(client: AsyncClient, auth_headers):
    response = await client.post(USERS_URL, json=_new_user(username="admin"), headers=auth_headers[UserRole.ADMIN])
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "RESOURCE_CONFLICT"


async def test_create_user_duplicate_email(client: AsyncClient, auth_headers):
    response = await client.post(
        USERS_URL, json=_new_user(email="admin@cleanstation.test"), headers=auth_headers[UserRole.ADMIN]
    )
    assert response.status_code == 409


async def test_create_user_validation(client: AsyncClient, auth_headers):
    """Short passwords and malformed e-mails fail schema validation."""
    response = await client.post(
        USERS_URL, json=_new_user(password="short", email="not-an-email"), headers=auth_headers[UserRole.ADMIN]
    )
    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["error"]["details"]}
    assert {"password", "email"} <= fields


async def test_update_user_role(client: AsyncClient, users, auth_headers):
    user = users[UserRole.ASSEMBLER]
    response = await client.patch(
        f"{USERS_URL}/{user.id}",
        json={"role": "QC_PERSON", "fullName": "Promoted"},
        headers=auth_headers[UserRole.ADMIN],
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "QC_PERSON"
    assert data["full_name"] == "Promoted"


async def test_update_unknown_user(client: AsyncClient, auth_headers):
    response = await client.patch(f"{USERS_URL}/missing", json={"fullName": "X"}, headers=auth_headers[UserRole.ADMIN])
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
