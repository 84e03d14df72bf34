"""API v1: matches, stats, notifications and meta endpoints."""

from fastapi import APIRouter

from .matches import router as matches_router
from .meta import router as meta_router
from .notifications import router as notifications_router
from .stats import router as stats_router

router = APIRouter(prefix="/api/v1", tags=["api_v1"])
router.include_router(matches_router)
router.include_router(stats_router)
router.include_router(notifications_router)
router.include_router(meta_router)

api_v1_router = router
