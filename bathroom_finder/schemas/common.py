"""Common Pydantic schemas."""
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = {
        "from_attributes": True,
        "validate_assignment": True,
        "arbitrary_types_allowed": True,
    }


class ApiResponse(BaseSchema, Generic[T]):
    """Envelope wrapping every API result."""

    success: bool = Field(..., description="Whether the request succeeded")
    data: Optional[T] = Field(None, description="Result payload")
    error: Optional[str] = Field(None, description="Error message")

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        return cls(success=True, data=data)


class ErrorResponse(BaseSchema):
    """Error response schema."""

    success: bool = Field(False, description="Always false")
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Dict[str, Any] = Field(default_factory=dict, description="Error details")


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str = Field(..., description="Overall health status")
    version: str = Field(..., description="Application version")
