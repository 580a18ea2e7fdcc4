"""Main API router"""

from fastapi import APIRouter, Depends

from .dependencies import get_app_settings
from .routes import auth, users
from ..core.config import Settings

# Main API router
api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])


@api_router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.VERSION}
