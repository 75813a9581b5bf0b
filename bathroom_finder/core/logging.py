"""Logging configuration and utilities."""
import logging
import sys
from typing import Any, Dict

import structlog
from structlog.stdlib import LoggerFactory

from ..config import settings


def configure_logging():
    """Configure structured logging."""

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.monitoring.log_level.upper()),
    )

    # Set third-party log levels
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class RequestLogger:
    """Request logging utility."""

    @staticmethod
    def log_request(
        method: str,
        path: str,
        request_id: str = None,
        extra_data: Dict[str, Any] = None
    ):
        """Log incoming request."""
        logger = structlog.get_logger("api.request")
        logger.info(
            "Request started",
            method=method,
            path=path,
            request_id=request_id,
            **(extra_data or {})
        )

    @staticmethod
    def log_response(
        method: str,
        path: str,
        status_code: int,
        response_time_ms: float,
        request_id: str = None,
    ):
        """Log response."""
        logger = structlog.get_logger("api.response")
        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            response_time_ms=response_time_ms,
            request_id=request_id,
        )


class SecurityLogger:
    """Security event logging utility.

    Never pass passwords or hashes to these helpers.
    """

    @staticmethod
    def log_login_attempt(
        email: str,
        success: bool,
        state: str,
        stage: str = None,
        failure_reason: str = None
    ):
        """Log login attempt."""
        logger = structlog.get_logger("security.auth")
        logger.info(
            "Login attempt",
            event_type="login_attempt",
            email=email,
            success=success,
            state=state,
            stage=stage,
            failure_reason=failure_reason
        )

    @staticmethod
    def log_registration(
        email: str,
        success: bool,
        user_id: str = None,
        failure_reason: str = None
    ):
        """Log account registration."""
        logger = structlog.get_logger("security.auth")
        logger.info(
            "User registration",
            event_type="user_registration",
            email=email,
            success=success,
            user_id=user_id,
            failure_reason=failure_reason
        )

    @staticmethod
    def log_password_change(user_id: str, rehashed: bool):
        """Log password change."""
        logger = structlog.get_logger("security.auth")
        logger.info(
            "Password changed",
            event_type="password_change",
            user_id=user_id,
            rehashed=rehashed
        )

    @staticmethod
    def log_hashing_failure(operation: str, error_type: str):
        """Log an internal hashing failure."""
        logger = structlog.get_logger("security.hashing")
        logger.error(
            "Password hashing failed",
            event_type="hashing_failure",
            operation=operation,
            error_type=error_type
        )
