"""Main v1 API router that aggregates all sub-routers."""

from fastapi import APIRouter

from .summaries import router as summaries_router

# Main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(summaries_router, prefix="/summaries", tags=["Summaries"])

__all__ = ["router"]
