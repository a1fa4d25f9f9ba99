"""Viewport buffering and validity filtering for upstream fetches."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Iterable, Optional

from skyview.config import settings
from skyview.ingestors.opensky import OpenSkyClient
from skyview.models.aircraft import AircraftState
from skyview.models.viewport import BufferedRegion, ViewportRegion

logger = logging.getLogger("skyview.viewport")

MIN_BUFFER_FRACTION = 0.1
MAX_BUFFER_FRACTION = 0.5
BUFFER_STEP_PER_ZOOM = 0.05


def buffer_fraction(zoom: int) -> float:
    """Margin added around the viewport; larger when zoomed out."""

    return max(MIN_BUFFER_FRACTION, MAX_BUFFER_FRACTION - zoom * BUFFER_STEP_PER_ZOOM)


def buffer_region(region: ViewportRegion, zoom: int) -> BufferedRegion:
    margin = buffer_fraction(zoom)
    lat_pad = region.lat_span * margin
    lon_pad = region.lon_span * margin
    return BufferedRegion(
        north=region.north + lat_pad,
        south=region.south - lat_pad,
        east=region.east + lon_pad,
        west=region.west - lon_pad,
        margin=margin,
    )


def is_renderable(
    aircraft: AircraftState, now: float, stale_after: float
) -> bool:
    """Positioned, airborne and heard from within ``stale_after`` seconds."""

    if not aircraft.is_placeable:
        return False
    return now - aircraft.last_contact <= stale_after


def filter_renderable(
    aircraft: Iterable[AircraftState],
    *,
    now: float | None = None,
    stale_after: float | None = None,
) -> list[AircraftState]:
    current = time.time() if now is None else now
    max_age = settings.stale_after_seconds if stale_after is None else stale_after
    return [a for a in aircraft if is_renderable(a, current, max_age)]


@dataclass
class AggregationResult:
    """Filtered aircraft plus the region that was actually queried."""

    aircraft: list[AircraftState]
    region: Optional[BufferedRegion]
    fetched_count: int


class ViewportAggregator:
    """Fetch aircraft for the current view and drop unusable reports."""

    def __init__(self, client: OpenSkyClient, *, stale_after: float | None = None) -> None:
        self.client = client
        self.stale_after = (
            settings.stale_after_seconds if stale_after is None else stale_after
        )

    async def aggregate(
        self,
        viewport: ViewportRegion | None,
        zoom: int,
        *,
        now: float | None = None,
    ) -> AggregationResult:
        region = buffer_region(viewport, zoom) if viewport is not None else None

        if region is not None:
            fetched = await self.client.fetch_in_region(region)
        else:
            fetched = await self.client.fetch_all()

        valid = filter_renderable(
            fetched, now=time.time() if now is None else now, stale_after=self.stale_after
        )
        logger.debug(
            "Aggregated %s/%s aircraft (region=%s, zoom=%s)",
            len(valid),
            len(fetched),
            region,
            zoom,
        )
        return AggregationResult(aircraft=valid, region=region, fetched_count=len(fetched))


__all__ = [
    "AggregationResult",
    "ViewportAggregator",
    "buffer_fraction",
    "buffer_region",
    "filter_renderable",
    "is_renderable",
]
