"""Tests for authentication endpoints."""
from httpx import AsyncClient
from sqlalchemy.exc import DataError

from bathroom_finder.services.user_store import SQLAlchemyUserStore


async def register(client: AsyncClient, **overrides):
    payload = {
        "email": "newuser@example.com",
        "password": "newpassword123",
        "name": "New User",
    }
    payload.update(overrides)
    return await client.post("/api/v1/auth/register", json=payload)


async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_register_user(client: AsyncClient):
    response = await register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["error"] is None
    assert body["data"]["email"] == "newuser@example.com"
    assert body["data"]["role"] == "user"
    assert "password" not in body["data"]
    assert "hashed_password" not in body["data"]
    assert "X-Request-ID" in response.headers


async def test_register_validation_error(client: AsyncClient):
    response = await register(
        client,
        password="short12",
        home_location={"lat": 200, "lng": 0, "address": "Nowhere"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "VALIDATION_ERROR"
    assert set(body["details"]["fields"]) == {"password", "home_location.lat"}
    assert "short12" not in response.text


async def test_register_duplicate_email(client: AsyncClient):
    await register(client)

    response = await register(client, email="NewUser@Example.com", name="Duplicate User")

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "User with this email already exists"
    assert body["error_code"] == "DUPLICATE_EMAIL"


async def test_login_success(client: AsyncClient):
    await register(client)

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "newuser@example.com", "password": "newpassword123"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["email"] == "newuser@example.com"
    assert "hashed_password" not in body["data"]


async def test_login_failures_are_indistinguishable(client: AsyncClient):
    await register(client)

    wrong_password = await client.post(
        "/api/v1/auth/login",
        json={"email": "newuser@example.com", "password": "wrongpassword"},
    )
    unknown_email = await client.post(
        "/api/v1/auth/login",
        json={"email": "nonexistent@example.com", "password": "newpassword123"},
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"] == "Invalid email or password"


async def test_login_missing_password(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "newuser@example.com"},
    )

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert "password" in response.json()["details"]["fields"]


async def test_change_password(client: AsyncClient):
    await register(client)

    response = await client.post(
        "/api/v1/auth/change-password",
        json={
            "email": "newuser@example.com",
            "current_password": "newpassword123",
            "new_password": "newtestpassword123",
        },
    )

    assert response.status_code == 200
    assert response.json()["success"] is True

    login = await client.post(
        "/api/v1/auth/login",
        json={"email": "newuser@example.com", "password": "newtestpassword123"},
    )
    assert login.status_code == 200


async def test_change_password_wrong_current(client: AsyncClient):
    await register(client)

    response = await client.post(
        "/api/v1/auth/change-password",
        json={
            "email": "newuser@example.com",
            "current_password": "wrongpassword",
            "new_password": "newtestpassword123",
        },
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


async def test_database_error_does_not_leak_hash(client: AsyncClient, monkeypatch):
    async def failing_create(self, record):
        raise DataError(
            "INSERT INTO users ...",
            (record.email, record.hashed_password),
            Exception("value too long for type character varying(255)"),
        )

    monkeypatch.setattr(SQLAlchemyUserStore, "create", failing_create)

    response = await register(client)

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "INTERNAL_ERROR"
    assert "$2b$" not in response.text
    assert "newpassword123" not in response.text
    assert "message" not in body["details"]
