"""Renderer-facing aircraft endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from skyview.api.dependencies import get_tracker
from skyview.ingestors.opensky import UpstreamFetchError
from skyview.models import (
    AircraftState,
    SnapshotResponse,
    TrackerStatus,
    ViewportUpdate,
)
from skyview.services.tracker import FlightTracker

router = APIRouter(prefix="/api/v1", tags=["aircraft"])

logger = logging.getLogger("skyview.api.aircraft")


@router.get(
    "/aircraft",
    response_model=SnapshotResponse,
    summary="Current aircraft snapshot",
)
async def get_snapshot(tracker: FlightTracker = Depends(get_tracker)) -> SnapshotResponse:
    """Return the aircraft and clusters accepted in the latest cycle."""

    snapshot = tracker.snapshot()
    return SnapshotResponse(
        aircraft=list(snapshot.singles),
        clusters=list(snapshot.clusters),
        status=tracker.status,
        stats=tracker.stats,
    )


@router.get("/status", response_model=TrackerStatus, summary="Refresh status")
async def get_status(tracker: FlightTracker = Depends(get_tracker)) -> TrackerStatus:
    return tracker.status


@router.post("/refresh", response_model=TrackerStatus, summary="Force a refresh cycle")
async def refresh(tracker: FlightTracker = Depends(get_tracker)) -> TrackerStatus:
    """Run a refresh cycle immediately, joining one already in flight."""

    return await tracker.refresh()


@router.get(
    "/aircraft/{icao24}",
    response_model=AircraftState,
    summary="Look up an aircraft by ICAO address",
)
async def search_aircraft(
    icao24: str, tracker: FlightTracker = Depends(get_tracker)
) -> AircraftState:
    try:
        aircraft = await tracker.search(icao24)
    except UpstreamFetchError as exc:
        logger.warning("Aircraft search for %s failed: %s", icao24, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc

    if aircraft is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Aircraft {icao24.lower()} not found",
        )
    return aircraft


@router.put(
    "/viewport",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Notify a viewport change",
)
async def update_viewport(
    update: ViewportUpdate, tracker: FlightTracker = Depends(get_tracker)
) -> dict[str, str]:
    """Store the new view and start a refresh in the background."""

    tracker.update_viewport(update.region, update.zoom)
    tracker.schedule_refresh()
    return {"status": "accepted"}


@router.get(
    "/clusters/{cluster_id}",
    response_model=list[AircraftState],
    summary="Members of a clicked cluster",
)
async def get_cluster_members(
    cluster_id: str, tracker: FlightTracker = Depends(get_tracker)
) -> list[AircraftState]:
    members = tracker.cluster_members(cluster_id)
    if members is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cluster {cluster_id} not found",
        )
    return members
