"""API models and schemas."""
from .schemas import ErrorCode, ErrorResponse, HealthResponse

__all__ = ["ErrorCode", "ErrorResponse", "HealthResponse"]
