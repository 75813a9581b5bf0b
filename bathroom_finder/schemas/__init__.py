"""Pydantic schemas module."""
from .auth import (
    HomeLocation,
    LoginRequest,
    NewUserRecord,
    PasswordChangeRequest,
    StoredUser,
    UserCreate,
    UserResponse,
    UserRole,
)
from .common import (
    ApiResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "HomeLocation",
    "LoginRequest",
    "NewUserRecord",
    "PasswordChangeRequest",
    "StoredUser",
    "UserCreate",
    "UserResponse",
    "UserRole",
    # Common
    "ApiResponse",
    "ErrorResponse",
    "HealthResponse",
]
