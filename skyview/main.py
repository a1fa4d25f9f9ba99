from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from skyview.api import api_router
from skyview.config import settings
from skyview.ingestors import OpenSkyClient, load_fallback_aircraft
from skyview.services import AircraftIconCache, FlightTracker

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("skyview")


def build_tracker() -> FlightTracker:
    """Construct the shared OpenSky client and the tracker that owns it."""

    client = OpenSkyClient(auth=settings.opensky_auth())
    fallback = load_fallback_aircraft(settings.fallback_path) if settings.fallback_path else []
    return FlightTracker(client=client, fallback_aircraft=fallback)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    if getattr(app.state, "icon_cache", None) is None:
        app.state.icon_cache = AircraftIconCache(max_size=settings.icon_cache_size)
    if getattr(app.state, "tracker", None) is None:
        app.state.tracker = build_tracker()
    logger.info("Flight tracker initialized")

    if settings.auto_refresh:
        app.state.tracker_task = asyncio.create_task(app.state.tracker.run())
        logger.info(
            "Auto refresh started (every %.1fs)", app.state.tracker.refresh_interval
        )

    try:
        yield
    finally:
        task = getattr(app.state, "tracker_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


app = FastAPI(title="SkyView Backend", lifespan=lifespan)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "SkyView backend is running"}
