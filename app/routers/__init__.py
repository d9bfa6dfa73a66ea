"""API routers."""

from app.routers.analytics import router as analytics_router
from app.routers.claims import router as claims_router
from app.routers.homeowners import router as homeowners_router

__all__ = [
    "analytics_router",
    "claims_router",
    "homeowners_router",
]
