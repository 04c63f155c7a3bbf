"""
puttr

A small service that stores whatever you PUT to it.

- GET /token issues a short-lived upload token
- PUT /data with "Authorization: Token <t>" and a "content" field writes
  the content to {upload_root}/{YYYY-MM}/data-{timestamp}-{token}.{ext}
- GET / describes the above
- GET /healthz reports service health
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI

from .api import router
from .core.config import Settings, get_settings
from .core.errors import register_exception_handlers
from .core.logging_config import configure_logging
from .core.security import TokenStore
from .services import UploadMaterializer

logger = logging.getLogger("puttr")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Logging is configured here so every server process (including uvicorn
    reload workers, which import this module) gets the same setup.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION}",
        extra={"event_type": "system.startup"}
    )
    logger.info(f"Upload root: {app.state.materializer.upload_root}")
    logger.info(f"Token TTL: {settings.TOKEN_TTL_SECONDS}s")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The token store and the materializer are created here and live on
    app.state for the lifetime of the app; handlers reach them through
    dependencies.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="puttr",
        description="Store content sent with an authenticated PUT request.",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.state.settings = settings
    app.state.token_store = TokenStore(
        ttl=timedelta(seconds=settings.TOKEN_TTL_SECONDS)
    )
    app.state.materializer = UploadMaterializer(settings.upload_root_path)

    register_exception_handlers(app)
    app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    print(f"Running at http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "puttr.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,
    )
