"""User and authentication schemas."""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Optional

from pydantic import AliasChoices, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from .common import BaseSchema

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"
MIN_PASSWORD_LENGTH = 8
# bcrypt ignores everything past 72 bytes of input.
MAX_PASSWORD_BYTES = 72
MIN_NAME_LENGTH = 2
# Column widths in the users table.
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_ADDRESS_LENGTH = 500

NormalizedEmail = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        to_lower=True,
        max_length=MAX_EMAIL_LENGTH,
        pattern=EMAIL_PATTERN,
    ),
]


def check_password_bytes(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PydanticCustomError(
            "password_too_long",
            "Password must be at most {max_bytes} bytes long",
            {"max_bytes": MAX_PASSWORD_BYTES},
        )
    return password


class UserRole(str, Enum):
    """User roles."""

    USER = "user"
    ADMIN = "admin"


class HomeLocation(BaseSchema):
    """A user's home location."""

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False, description="Longitude")
    address: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_ADDRESS_LENGTH),
    ] = Field(..., description="Street address")


class UserCreate(BaseSchema):
    """User registration schema.

    ``homeLocation`` is accepted as well as ``home_location``.
    """

    email: NormalizedEmail = Field(..., description="User email address")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, description="User password")
    name: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True, min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH
        ),
    ] = Field(..., description="Display name")
    role: UserRole = Field(default=UserRole.USER, description="User role")
    home_location: Optional[HomeLocation] = Field(
        None,
        validation_alias=AliasChoices("home_location", "homeLocation"),
        description="Home location",
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class NewUserRecord(BaseSchema):
    """Validated user with an already-hashed password, ready to persist."""

    email: str
    hashed_password: str = Field(..., repr=False)
    name: str
    role: UserRole = UserRole.USER
    home_location: Optional[HomeLocation] = None


class UserResponse(BaseSchema):
    """Sanitized user record; never carries the password hash."""

    id: uuid.UUID = Field(..., description="User ID")
    email: str = Field(..., description="User email address")
    name: str = Field(..., description="Display name")
    role: UserRole = Field(..., description="User role")
    home_location: Optional[HomeLocation] = Field(None, description="Home location")
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Account last update time")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without a timezone.
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class StoredUser(UserResponse):
    """User as read from the store.

    ``hashed_password`` is only populated when the store was asked to
    include it.
    """

    hashed_password: Optional[str] = Field(None, repr=False)

    def sanitized(self) -> UserResponse:
        return UserResponse.model_validate(self.model_dump(exclude={"hashed_password"}))


class LoginRequest(BaseSchema):
    """Login request schema."""

    email: str = Field(..., description="User email")
    password: str = Field(..., description="User password")


class PasswordChangeRequest(BaseSchema):
    """Password change request schema."""

    email: str = Field(..., description="User email")
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password")
