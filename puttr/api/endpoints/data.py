"""
Upload endpoint.

PUT /data with "Authorization: Token <t>" and a non-empty "content" field.
The content is written to a new file under the upload root; its extension
follows the request's Content-Type.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ...core.config import Settings
from ...core.security import token_prefix
from ...models import ErrorCode, ErrorResponse
from ...services import UploadMaterializer
from ..deps import (
    get_app_settings,
    get_correlation_id,
    get_materializer,
    read_content,
    require_token,
)

logger = logging.getLogger("puttr.data")

router = APIRouter()


@router.put(
    "/data",
    response_class=PlainTextResponse,
    summary="Upload Content",
    description="Store the 'content' field in a timestamped file.",
    responses={
        200: {"description": "Content stored", "content": {"text/plain": {}}},
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
        404: {"model": ErrorResponse, "description": "No content supplied"},
        500: {"model": ErrorResponse, "description": "Content could not be stored"}
    }
)
async def put_data(
    request: Request,
    token: str = Depends(require_token),
    materializer: UploadMaterializer = Depends(get_materializer),
    settings: Settings = Depends(get_app_settings),
    correlation_id: str = Depends(get_correlation_id)
) -> Response:
    """
    Store uploaded content.

    A StorageError from the materializer propagates to the application's
    exception handler and becomes a 500.
    """
    content, part_content_type = await read_content(
        request, max_part_size=settings.MAX_CONTENT_BYTES
    )

    if not content:
        logger.info(
            "Upload rejected: no content",
            extra={
                "event_type": "upload.rejected",
                "token_prefix": token_prefix(token),
                "correlation_id": correlation_id,
            }
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(
                error_code=ErrorCode.CONTENT_MISSING.value,
                message="No content supplied",
                correlation_id=correlation_id
            ).model_dump()
        )

    content_type = part_content_type or request.headers.get("content-type")
    await materializer.materialize(token, content, content_type)

    return PlainTextResponse("success")
