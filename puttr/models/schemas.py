"""
Pydantic schemas for API responses.
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Standard error codes."""
    AUTH_FAILED = "AUTH_FAILED"
    CONTENT_MISSING = "CONTENT_MISSING"
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response."""
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    correlation_id: str = Field(..., description="Request correlation ID for tracing")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "STORAGE_ERROR",
                "message": "Upload could not be stored",
                "correlation_id": "550e8400-e29b-41d4-a716-446655440000"
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Overall status: 'healthy' or 'degraded'")
    version: str = Field(..., description="Service version")
    upload_root: str = Field(..., description="Directory uploads are written under")
    upload_root_writable: bool = Field(..., description="Whether the upload root can be written")
    active_tokens: int = Field(..., description="Tokens currently held in the store")
    token_ttl_seconds: int = Field(..., description="Lifetime of an issued token")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "upload_root": "./uploads",
                "upload_root_writable": True,
                "active_tokens": 3,
                "token_ttl_seconds": 300
            }
        }
    )
