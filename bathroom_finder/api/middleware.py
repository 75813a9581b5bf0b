"""API middleware for request logging and error handling."""
import time
import uuid
from typing import Callable

from fastapi import HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import settings
from ..core.exceptions import BaseAPIException
from ..core.logging import RequestLogger
from ..schemas.common import ErrorResponse


def error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict = None
) -> JSONResponse:
    """Build the failure side of the ApiResponse envelope."""
    body = ErrorResponse(error=message, error_code=error_code, details=details or {})
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate request ID
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        # Log request
        start_time = time.time()
        RequestLogger.log_request(
            method=request.method,
            path=str(request.url.path),
            request_id=request_id,
            extra_data={
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent")
            }
        )

        # Process request
        response = await call_next(request)

        # Calculate response time
        response_time_ms = (time.time() - start_time) * 1000

        # Log response
        RequestLogger.log_response(
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            request_id=request_id
        )

        # Add request ID to response headers
        response.headers["X-Request-ID"] = request_id

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for handling exceptions and returning appropriate responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except BaseAPIException as e:
            # Handle custom API exceptions
            return error_response(e.status_code, e.message, e.error_code, e.details)

        except HTTPException as e:
            # Handle FastAPI HTTP exceptions
            return error_response(e.status_code, str(e.detail), "HTTP_EXCEPTION")

        except Exception as e:
            # Handle unexpected exceptions
            return error_response(
                500,
                "Internal server error",
                "INTERNAL_ERROR",
                {"error_type": type(e).__name__} if settings.debug else {},
            )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies in the ApiResponse envelope."""
    fields = {
        ".".join(str(part) for part in error["loc"] if part != "body") or "body": error["msg"]
        for error in exc.errors()
    }
    return error_response(422, "Validation failed", "VALIDATION_ERROR", {"fields": fields})
