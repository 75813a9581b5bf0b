"""Tests for registration and login."""
import asyncio
import uuid

import pytest

from bathroom_finder.core.exceptions import (
    DuplicateEmailError,
    HashingError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from bathroom_finder.schemas.auth import UserResponse, UserRole


async def test_register_returns_sanitized_user(auth_service, user_data):
    user = await auth_service.register(user_data)

    assert type(user) is UserResponse
    assert user.email == user_data["email"]
    assert user.name == user_data["name"]
    assert user.role == UserRole.USER
    assert "hashed_password" not in user.model_dump()
    assert "password" not in user.model_dump()


async def test_register_stores_hash_not_plaintext(auth_service, user_store, hasher, user_data):
    await auth_service.register(user_data)

    stored = await user_store.find_by_email(user_data["email"], include_secret=True)

    assert stored.hashed_password != user_data["password"]
    assert hasher.verify(user_data["password"], stored.hashed_password)


async def test_register_normalizes_email(auth_service, user_data):
    user_data["email"] = "  Test@Example.COM "

    user = await auth_service.register(user_data)

    assert user.email == "test@example.com"


async def test_register_with_home_location(auth_service, user_data):
    user_data["home_location"] = {
        "lat": 40.7128,
        "lng": -74.0060,
        "address": "New York, NY, USA",
    }

    user = await auth_service.register(user_data)

    assert user.home_location.lat == 40.7128
    assert user.home_location.address == "New York, NY, USA"


async def test_register_duplicate_case_variant(auth_service, user_store, user_data):
    await auth_service.register({**user_data, "email": "A@x.com"})

    with pytest.raises(DuplicateEmailError) as exc_info:
        await auth_service.register({**user_data, "email": "a@x.com", "name": "Second User"})

    assert exc_info.value.status_code == 409
    assert await user_store.count() == 1


async def test_register_invalid_latitude(auth_service, user_store, user_data):
    user_data["home_location"] = {"lat": 200, "lng": -74.0060, "address": "Invalid"}

    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register(user_data)

    assert set(exc_info.value.fields) == {"home_location.lat"}
    assert await user_store.count() == 0


async def test_register_invalid_longitude(auth_service, user_data):
    user_data["home_location"] = {"lat": 45, "lng": 200, "address": "Invalid"}

    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register(user_data)

    assert set(exc_info.value.fields) == {"home_location.lng"}


async def test_register_short_password(auth_service, user_data):
    user_data["password"] = "short12"

    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register(user_data)

    assert set(exc_info.value.fields) == {"password"}


async def test_register_validates_before_hashing(auth_service, hasher, monkeypatch, user_data):
    def fail_hash(secret):
        raise AssertionError("hash should not run for invalid input")

    monkeypatch.setattr(hasher, "hash", fail_hash)
    user_data["email"] = "invalid-email"

    with pytest.raises(ValidationError):
        await auth_service.register(user_data)


async def test_register_hashing_failure_stores_nothing(
    auth_service, user_store, hasher, monkeypatch, user_data
):
    def broken_hash(secret):
        raise HashingError()

    monkeypatch.setattr(hasher, "hash", broken_hash)

    with pytest.raises(HashingError):
        await auth_service.register(user_data)

    assert await user_store.count() == 0


async def test_concurrent_duplicate_registration(auth_service, user_store, user_data):
    attempts = 5

    results = await asyncio.gather(
        *(
            auth_service.register({**user_data, "name": f"User {i}"})
            for i in range(attempts)
        ),
        return_exceptions=True,
    )

    successes = [r for r in results if isinstance(r, UserResponse)]
    duplicates = [r for r in results if isinstance(r, DuplicateEmailError)]
    assert len(successes) == 1
    assert len(duplicates) == attempts - 1
    assert await user_store.count() == 1


async def test_authenticate_success(auth_service, test_user, user_data, test_password):
    user = await auth_service.authenticate(user_data["email"], test_password)

    assert type(user) is UserResponse
    assert user.id == test_user.id
    assert user.email == user_data["email"]
    assert "hashed_password" not in user.model_dump()


async def test_authenticate_email_case_insensitive(auth_service, test_user, test_password):
    user = await auth_service.authenticate("  TEST@example.com", test_password)

    assert user.id == test_user.id


async def test_wrong_password_and_unknown_email_fail_identically(auth_service, test_user):
    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await auth_service.authenticate(test_user.email, "wrongpassword")

    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await auth_service.authenticate("nonexistent@example.com", "anypassword")

    assert type(wrong_password.value) is type(unknown_email.value)
    assert wrong_password.value.message == unknown_email.value.message
    assert wrong_password.value.message == "Invalid email or password"
    assert wrong_password.value.error_code == unknown_email.value.error_code
    assert wrong_password.value.details == unknown_email.value.details == {}


async def test_change_password(auth_service, test_user, test_password):
    await auth_service.change_password(test_user.email, test_password, "brandnewpass1")

    user = await auth_service.authenticate(test_user.email, "brandnewpass1")
    assert user.id == test_user.id

    with pytest.raises(InvalidCredentialsError):
        await auth_service.authenticate(test_user.email, test_password)


async def test_change_password_unchanged_keeps_hash(
    auth_service, user_store, test_user, test_password
):
    before = await user_store.find_by_email(test_user.email, include_secret=True)

    result = await auth_service.change_password(test_user.email, test_password, test_password)

    after = await user_store.find_by_email(test_user.email, include_secret=True)
    assert after.hashed_password == before.hashed_password
    assert "hashed_password" not in result.model_dump()


async def test_change_password_wrong_current(auth_service, test_user):
    with pytest.raises(InvalidCredentialsError):
        await auth_service.change_password(test_user.email, "wrongpassword", "brandnewpass1")


async def test_change_password_too_short(auth_service, test_user, test_password):
    with pytest.raises(ValidationError) as exc_info:
        await auth_service.change_password(test_user.email, test_password, "short12")

    assert set(exc_info.value.fields) == {"password"}


async def test_get_user(auth_service, test_user):
    user = await auth_service.get_user(test_user.id)

    assert user == test_user

    with pytest.raises(NotFoundError):
        await auth_service.get_user(uuid.uuid4())


async def test_register_camel_case_invalid_latitude(auth_service, user_store, user_data):
    user_data["homeLocation"] = {"lat": 200, "lng": 0, "address": "Nowhere"}

    with pytest.raises(ValidationError) as exc_info:
        await auth_service.register(user_data)

    assert set(exc_info.value.fields) == {"home_location.lat"}
    assert await user_store.count() == 0
