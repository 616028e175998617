"""API routes package."""

from fastapi import APIRouter

from expirycal.routers.api import calendar, items

# Create main API router with /api prefix
ROUTER = APIRouter(prefix="/api")

# Include all sub-routers
ROUTER.include_router(calendar.ROUTER)
ROUTER.include_router(items.ROUTER)

__all__ = [
    "calendar",
    "items",
    "ROUTER",
]
