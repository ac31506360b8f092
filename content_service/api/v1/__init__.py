"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from content_service.api.v1.assets import router as assets_router
from content_service.api.v1.content import router as content_router

router = APIRouter(prefix="/api/v1")
router.include_router(content_router)
router.include_router(assets_router)

__all__ = ["router"]
