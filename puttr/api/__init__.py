"""HTTP API."""
from fastapi import APIRouter

from .endpoints import data, health, pages, tokens

router = APIRouter()

router.include_router(pages.router, tags=["Pages"])
router.include_router(tokens.router, tags=["Tokens"])
router.include_router(data.router, tags=["Data"])
router.include_router(health.router, tags=["Health"])
