"""Periodic refresh loop tying the aircraft pipeline together."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import time
from typing import Callable, Optional, Sequence

from skyview.config import settings
from skyview.ingestors.opensky import OpenSkyClient, UpstreamFetchError
from skyview.models.aircraft import AircraftState
from skyview.models.rendering import SnapshotStats, TrackerStatus
from skyview.models.viewport import ViewportRegion
from skyview.services.clustering import SpatialClusterer
from skyview.services.prioritizer import Prioritizer, budget_for_zoom
from skyview.services.repository import AircraftRepository, AircraftSnapshot
from skyview.services.viewport import ViewportAggregator

logger = logging.getLogger("skyview.tracker")


class FlightTracker:
    """Runs fetch, filter, prioritise, cluster and publish once per interval.

    Cycles never overlap: a refresh requested while one is in flight waits on
    the running cycle. A failed cycle keeps the previous snapshot and reports
    the error through :attr:`status`.
    """

    def __init__(
        self,
        *,
        client: OpenSkyClient,
        aggregator: Optional[ViewportAggregator] = None,
        prioritizer: Optional[Prioritizer] = None,
        clusterer: Optional[SpatialClusterer] = None,
        repository: Optional[AircraftRepository] = None,
        refresh_interval: float | None = None,
        zoom: int | None = None,
        fallback_aircraft: Sequence[AircraftState] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.aggregator = aggregator or ViewportAggregator(client)
        self.prioritizer = prioritizer or Prioritizer()
        self.clusterer = clusterer or SpatialClusterer()
        self.repository = repository or AircraftRepository()
        self.refresh_interval = (
            settings.refresh_interval if refresh_interval is None else refresh_interval
        )
        self.fallback_aircraft = list(fallback_aircraft or [])
        self._clock = clock
        self._viewport: ViewportRegion | None = None
        self._zoom = settings.default_zoom if zoom is None else zoom
        self._view_generation = 0
        self._status = TrackerStatus()
        self._inflight: asyncio.Task | None = None

    @property
    def status(self) -> TrackerStatus:
        return self._status.model_copy()

    @property
    def viewport(self) -> ViewportRegion | None:
        return self._viewport

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def stats(self) -> SnapshotStats:
        return SnapshotStats(
            total_aircraft=len(self.repository),
            max_for_zoom=budget_for_zoom(self._zoom),
            zoom=self._zoom,
        )

    def snapshot(self) -> AircraftSnapshot:
        return self.repository.snapshot()

    async def run(self) -> None:
        """Refresh forever on the configured interval until cancelled."""

        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                logger.info("Flight tracker cancelled")
                raise
            except Exception as exc:  # pragma: no cover - defensive logging
                logger.warning("Flight tracker cycle error: %s", exc)

            await asyncio.sleep(self.refresh_interval)

    async def refresh(self) -> TrackerStatus:
        """Run a cycle now, or join the one already running."""

        task = self.schedule_refresh()
        await asyncio.shield(task)
        return self.status

    def schedule_refresh(self) -> asyncio.Task:
        """Start a cycle in the background unless one is already running."""

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._run_cycle())
        return self._inflight

    def update_viewport(self, region: ViewportRegion | None, zoom: int) -> None:
        """Record the renderer's view; a running or the next cycle queries it."""

        self._viewport = region
        self._zoom = zoom
        self._view_generation += 1
        logger.debug("Viewport updated: region=%s zoom=%s", region, zoom)

    async def _run_cycle(self) -> None:
        self._status = self._status.model_copy(update={"loading": True, "error": None})
        while True:
            generation = self._view_generation
            viewport, zoom = self._viewport, self._zoom
            try:
                result = await self.aggregator.aggregate(viewport, zoom, now=self._clock())
            except UpstreamFetchError as exc:
                self._handle_failure(exc)
                return
            except Exception:
                self._status = self._status.model_copy(update={"loading": False})
                raise
            if generation == self._view_generation:
                break
            # The view moved while fetching; query again before publishing.
            logger.debug("Viewport changed mid-cycle, refetching for zoom %s", self._zoom)

        selected = self.prioritizer.select(result.aircraft, zoom, now=self._clock())
        clustered = self.clusterer.cluster(selected, zoom)
        self.repository.replace(selected, clustered.clusters, clustered.unclustered)
        self._status = TrackerStatus(
            loading=False, error=None, last_updated=datetime.now(timezone.utc)
        )
        logger.info(
            "Refreshed %s aircraft (%s fetched, %s clusters, zoom %s)",
            len(selected),
            result.fetched_count,
            len(clustered.clusters),
            zoom,
        )

    def _handle_failure(self, exc: UpstreamFetchError) -> None:
        message = str(exc) or "Failed to fetch aircraft data"
        logger.warning("Aircraft refresh failed: %s", message)

        if self.repository.is_empty() and self.fallback_aircraft:
            self.repository.replace(self.fallback_aircraft)
            self._status = TrackerStatus(
                loading=False,
                error=f"Using fallback data - {message}",
                last_updated=datetime.now(timezone.utc),
            )
            logger.info("Installed %s fallback aircraft", len(self.fallback_aircraft))
            return

        self._status = self._status.model_copy(update={"loading": False, "error": message})

    async def search(self, icao24: str) -> AircraftState | None:
        """Find an aircraft in the snapshot, falling back to an upstream lookup.

        Only placeable results are merged into the snapshot; grounded or
        positionless aircraft are returned without being published. Upstream
        failures propagate to the caller and leave the cycle status untouched.
        """

        key = icao24.strip().lower()
        existing = self.repository.get(key)
        if existing is not None:
            return existing

        aircraft = await self.client.fetch_by_key(key)
        if aircraft is not None and aircraft.is_placeable:
            self.repository.add(aircraft)
        return aircraft

    def cluster_members(self, cluster_id: str) -> list[AircraftState] | None:
        summary = self.repository.snapshot().cluster(cluster_id)
        if summary is None:
            return None
        return list(summary.members)


__all__ = ["FlightTracker"]
