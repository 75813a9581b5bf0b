"""Main FastAPI application."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .core.hashing import PasswordHasher
from .core.logging import configure_logging
from .database import Database
from .api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    request_validation_handler,
)
from .api.routes import auth
from .schemas.common import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    database: Database = app.state.database
    # Startup
    configure_logging()
    database.connect()
    await database.create_all()
    yield
    # Shutdown
    await database.close()


def create_app(
    database: Optional[Database] = None,
    hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    The app owns the database handle: it is opened on startup and closed on
    shutdown.
    """

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        lifespan=lifespan
    )
    app.state.database = database or Database.from_settings()
    app.state.hasher = hasher or PasswordHasher()

    # Add middleware
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/api/v1")

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="healthy", version=settings.api.version)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bathroom_finder.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
