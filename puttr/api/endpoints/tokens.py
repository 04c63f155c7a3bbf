"""
Token endpoint.

Anyone may ask for a token; it admits uploads until it expires.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ...core.security import TokenStore, token_prefix
from ..deps import get_token_store

logger = logging.getLogger("puttr.tokens")

router = APIRouter()


@router.get(
    "/token",
    response_class=PlainTextResponse,
    summary="Issue Token",
    description="Issue a short-lived upload token. The response body is the token.",
    responses={200: {"description": "Token issued", "content": {"text/plain": {}}}}
)
async def issue_token(
    token_store: TokenStore = Depends(get_token_store)
) -> PlainTextResponse:
    token = token_store.issue()

    logger.info(
        "Token issued",
        extra={
            "event_type": "token.issued",
            "token_prefix": token_prefix(token),
            "active_tokens": len(token_store),
        }
    )

    return PlainTextResponse(token)
