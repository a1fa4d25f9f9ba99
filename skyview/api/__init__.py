"""API routers for the SkyView backend."""

from fastapi import APIRouter

from .aircraft import router as aircraft_router
from .health import router as health_router
from .icons import router as icons_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(aircraft_router)
api_router.include_router(icons_router)

__all__ = ["api_router"]
