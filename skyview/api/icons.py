"""Aircraft marker icon endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from skyview.api.dependencies import get_icon_cache
from skyview.models import IconCacheStats, IconDescriptor
from skyview.services.icon_cache import AircraftIconCache

router = APIRouter(prefix="/api/v1/icons", tags=["icons"])


@router.get("", response_model=IconDescriptor, summary="Icon for a heading")
def get_icon(
    heading: Optional[float] = Query(default=None, description="Heading in degrees"),
    selected: bool = Query(default=False, description="Selected-state icon"),
    cache: AircraftIconCache = Depends(get_icon_cache),
) -> IconDescriptor:
    return cache.get_icon(heading, selected)


@router.get("/stats", response_model=IconCacheStats, summary="Icon cache statistics")
def get_icon_stats(cache: AircraftIconCache = Depends(get_icon_cache)) -> IconCacheStats:
    return cache.stats()
