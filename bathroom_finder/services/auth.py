"""Registration and login."""
import uuid
from enum import Enum
from typing import Any

from ..core.exceptions import (
    BaseAPIException,
    HashingError,
    InvalidCredentialsError,
    NotFoundError,
)
from ..core.hashing import PasswordHasher
from ..core.logging import SecurityLogger
from ..core.validation import validate_password, validate_user_record
from ..schemas.auth import NewUserRecord, StoredUser, UserResponse
from .user_store import UserStore, normalize_email


class AuthState(str, Enum):
    """Stages of a login attempt."""

    IDLE = "idle"
    LOOKUP_PENDING = "lookup_pending"
    VERIFY_PENDING = "verify_pending"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


class AuthService:
    """Authentication service.

    Holds no per-request state; the store is the only shared resource and
    is trusted to enforce email uniqueness.
    """

    def __init__(self, store: UserStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    async def _hash(self, password: str) -> str:
        try:
            return await self.hasher.hash_async(password)
        except HashingError as e:
            SecurityLogger.log_hashing_failure("hash", type(e.__cause__).__name__)
            raise

    def _rejected(self, email: str, stage: AuthState, reason: str) -> InvalidCredentialsError:
        SecurityLogger.log_login_attempt(
            email=email,
            success=False,
            state=AuthState.REJECTED.value,
            stage=stage.value,
            failure_reason=reason,
        )
        return InvalidCredentialsError()

    async def _verify_credentials(self, email: str, password: str) -> StoredUser:
        email = normalize_email(email)

        state = AuthState.LOOKUP_PENDING
        user = await self.store.find_by_email(email, include_secret=True)
        if user is None:
            # Same cost as a real mismatch, so response time does not reveal
            # which emails are registered.
            await self.hasher.dummy_verify_async(password)
            raise self._rejected(email, state, "unknown_email")

        state = AuthState.VERIFY_PENDING
        if not await self.hasher.verify_async(password, user.hashed_password):
            raise self._rejected(email, state, "password_mismatch")

        state = AuthState.AUTHENTICATED
        SecurityLogger.log_login_attempt(email=email, success=True, state=state.value)
        return user

    async def authenticate(self, email: str, password: str) -> UserResponse:
        """Check credentials and return the user without the password hash.

        Raises:
            InvalidCredentialsError: unknown email or wrong password, with
                the same message either way.
        """
        user = await self._verify_credentials(email, password)
        return user.sanitized()

    async def register(self, candidate: Any) -> UserResponse:
        """Validate, hash and store a new user.

        Raises:
            ValidationError: with every violated field.
            DuplicateEmailError: the normalized email is taken.
            HashingError: hashing failed; nothing was stored.
        """
        user_create = validate_user_record(candidate)
        hashed_password = await self._hash(user_create.password)

        record = NewUserRecord(
            email=user_create.email,
            hashed_password=hashed_password,
            name=user_create.name,
            role=user_create.role,
            home_location=user_create.home_location,
        )

        try:
            stored = await self.store.create(record)
        except BaseAPIException as e:
            SecurityLogger.log_registration(
                email=user_create.email,
                success=False,
                failure_reason=type(e).__name__,
            )
            raise

        SecurityLogger.log_registration(
            email=stored.email, success=True, user_id=str(stored.id)
        )
        return stored.sanitized()

    async def change_password(
        self, email: str, current_password: str, new_password: str
    ) -> UserResponse:
        """Replace a user's password after checking the current one.

        The hash is only recomputed when the new password differs from the
        current one.
        """
        user = await self._verify_credentials(email, current_password)
        validate_password(new_password)

        if new_password == current_password:
            SecurityLogger.log_password_change(str(user.id), rehashed=False)
            return user.sanitized()

        hashed_password = await self._hash(new_password)
        updated = await self.store.update_password(user.id, hashed_password)
        SecurityLogger.log_password_change(str(user.id), rehashed=True)
        return updated.sanitized()

    async def get_user(self, user_id: uuid.UUID) -> UserResponse:
        user = await self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.sanitized()
