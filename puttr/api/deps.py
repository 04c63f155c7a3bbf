"""
API dependencies for authentication and request parsing.
"""
import logging
import uuid
from typing import Optional, Tuple, Union

from fastapi import Depends, Header, HTTPException, Request, status
from starlette.datastructures import UploadFile

from ..core.config import Settings
from ..core.security import TokenStore, parse_authorization, token_prefix
from ..models import ErrorCode
from ..services import UploadMaterializer

logger = logging.getLogger("puttr.api")

CONTENT_FIELD = "content"

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_correlation_id(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-ID")
) -> str:
    """
    Get or generate a correlation ID for request tracing.

    Uses the X-Correlation-ID header if provided, otherwise generates one.
    """
    return x_correlation_id or str(uuid.uuid4())


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_token_store(request: Request) -> TokenStore:
    """The application's token store."""
    return request.app.state.token_store


def get_materializer(request: Request) -> UploadMaterializer:
    """The application's upload materializer."""
    return request.app.state.materializer


async def require_token(
    request: Request,
    authorization: Optional[str] = Header(None),
    token_store: TokenStore = Depends(get_token_store),
    correlation_id: str = Depends(get_correlation_id)
) -> str:
    """
    Validate the token from the Authorization header.

    Expects: Authorization: Token <token>

    Returns the token or raises a 401. Unknown and expired tokens are
    reported the same way.
    """
    token = parse_authorization(authorization)

    if token is None:
        message = (
            "Missing Authorization header" if not authorization
            else "Invalid Authorization header format. Expected: Token <token>"
        )
    elif not token_store.validate(token):
        message = "Invalid or expired token"
    else:
        return token

    logger.warning(
        message,
        extra={
            "event_type": "auth.failed",
            "endpoint": str(request.url.path),
            "token_prefix": token_prefix(token),
            "correlation_id": correlation_id,
        }
    )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error_code": ErrorCode.AUTH_FAILED.value,
            "message": message,
            "correlation_id": correlation_id
        },
        headers={"WWW-Authenticate": "Token"}
    )


async def read_content(
    request: Request,
    max_part_size: int
) -> Tuple[Optional[Union[bytes, str]], Optional[str]]:
    """
    Find the "content" field of an upload request.

    Looked up in the form body (urlencoded or multipart), then a JSON object
    body, then the query string. A multipart file part is read as bytes and
    its own content type is returned alongside it. Form parts up to
    max_part_size bytes are accepted.

    Returns:
        Tuple of (content, part_content_type); content is None if absent
    """
    content_type = (request.headers.get("content-type") or "").lower()

    if content_type.startswith(FORM_TYPES):
        form = await request.form(max_part_size=max_part_size)
        value = form.get(CONTENT_FIELD)
        if isinstance(value, UploadFile):
            return await value.read(), value.content_type
        if value is not None:
            return value, None

    elif "json" in content_type.split(";", 1)[0]:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get(CONTENT_FIELD), str):
            return body[CONTENT_FIELD], None

    return request.query_params.get(CONTENT_FIELD), None
