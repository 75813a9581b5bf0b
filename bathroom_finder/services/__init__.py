"""Services module."""
from .auth import AuthService, AuthState
from .user_store import SQLAlchemyUserStore, UserStore, normalize_email

__all__ = [
    "AuthService",
    "AuthState",
    "SQLAlchemyUserStore",
    "UserStore",
    "normalize_email",
]
