"""
Health check endpoint.

Returns service status, version, upload root state and token count.
No authentication required for health checks.
"""
import asyncio

from fastapi import APIRouter, Depends

from ...core.config import Settings
from ...core.security import TokenStore
from ...models import HealthResponse
from ...services import UploadMaterializer
from ..deps import get_app_settings, get_materializer, get_token_store

router = APIRouter()


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns service health, version, upload root status and active token count.",
)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    token_store: TokenStore = Depends(get_token_store),
    materializer: UploadMaterializer = Depends(get_materializer)
) -> HealthResponse:
    writable = await asyncio.get_running_loop().run_in_executor(
        None, materializer.is_writable
    )

    return HealthResponse(
        status="healthy" if writable else "degraded",
        version=settings.APP_VERSION,
        upload_root=str(materializer.upload_root),
        upload_root_writable=writable,
        active_tokens=len(token_store),
        token_ttl_seconds=int(token_store.ttl.total_seconds())
    )
