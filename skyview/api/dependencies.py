"""FastAPI dependencies resolving process-scoped components from app state."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from skyview.services.icon_cache import AircraftIconCache
from skyview.services.tracker import FlightTracker


def get_tracker(request: Request) -> FlightTracker:
    tracker: FlightTracker | None = getattr(request.app.state, "tracker", None)
    if tracker is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Flight tracker not initialized",
        )
    return tracker


def get_icon_cache(request: Request) -> AircraftIconCache:
    cache: AircraftIconCache | None = getattr(request.app.state, "icon_cache", None)
    if cache is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Icon cache not initialized",
        )
    return cache
