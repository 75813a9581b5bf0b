"""Custom exceptions for the application."""
from typing import Dict, Optional


class BaseAPIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = None,
        details: dict = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAPIException):
    """Authentication error."""

    def __init__(self, message: str = "Authentication failed", details: dict = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details
        )


class InvalidCredentialsError(AuthenticationError):
    """Login rejected.

    Raised with the same message whether the email is unknown or the
    password is wrong, so callers cannot tell registered emails apart.
    """

    MESSAGE = "Invalid email or password"

    def __init__(self):
        super().__init__(message=self.MESSAGE)
        self.error_code = "INVALID_CREDENTIALS"


class ValidationError(BaseAPIException):
    """Validation error carrying every violated field."""

    def __init__(
        self,
        fields: Optional[Dict[str, str]] = None,
        message: str = "Validation failed"
    ):
        self.fields = dict(fields or {})
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details={"fields": self.fields}
        )


class NotFoundError(BaseAPIException):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND_ERROR",
            details=details
        )


class ConflictError(BaseAPIException):
    """Resource conflict error."""

    def __init__(self, message: str = "Resource conflict", details: dict = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT_ERROR",
            details=details
        )


class DuplicateEmailError(ConflictError):
    """A user with the same normalized email already exists."""

    def __init__(self):
        super().__init__(message="User with this email already exists")
        self.error_code = "DUPLICATE_EMAIL"


class HashingError(BaseAPIException):
    """Password hashing or verification failed internally."""

    def __init__(self, message: str = "Password hashing failed", details: dict = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="HASHING_ERROR",
            details=details
        )
