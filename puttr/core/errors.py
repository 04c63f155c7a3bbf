"""
Error types and exception handlers for puttr.

Authentication and validation failures are ordinary responses (401/404)
produced by the endpoints. Storage failures are exceptions: they abort the
request and are turned into a 500 here, without stopping the service.
"""
import logging
import uuid
from pathlib import Path
from typing import Union

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..models import ErrorCode

logger = logging.getLogger("puttr.errors")


class PuttrError(Exception):
    """Base class for puttr errors."""


class StorageError(PuttrError):
    """Creating the upload directory or writing the upload file failed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Storage error for {self.path}: {reason}")


def get_request_correlation_id(request: Request) -> str:
    return request.headers.get("X-Correlation-ID") or str(uuid.uuid4())


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Report a failed write as a server error; other requests are unaffected."""
    correlation_id = get_request_correlation_id(request)

    logger.error(
        f"Upload could not be stored: {exc.reason}",
        extra={
            "event_type": "storage.failed",
            "path": exc.path,
            "correlation_id": correlation_id,
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": ErrorCode.STORAGE_ERROR.value,
            "message": "Upload could not be stored",
            "correlation_id": correlation_id
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    correlation_id = get_request_correlation_id(request)

    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": ErrorCode.INTERNAL_ERROR.value,
            "message": "An unexpected error occurred",
            "correlation_id": correlation_id
        }
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
