"""Database module."""
from .engine import Database
from .session import get_db

__all__ = [
    "Database",
    "get_db",
]
