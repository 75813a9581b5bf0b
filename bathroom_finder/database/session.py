"""Database dependency for FastAPI."""
from fastapi import Request

from .engine import Database


def get_db(request: Request) -> Database:
    """Return the database handle owned by the running app."""
    return request.app.state.database
