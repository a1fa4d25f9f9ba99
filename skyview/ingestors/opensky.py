"""Paced client for the OpenSky Network state-vector REST API."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import ValidationError

from skyview.config import settings
from skyview.models.aircraft import AircraftState
from skyview.models.viewport import ViewportRegion

logger = logging.getLogger("skyview.ingestors.opensky")

STATES_PATH = "/states/all"
_STATE_VECTOR_COLUMNS = 17


class UpstreamFetchError(RuntimeError):
    """Raised when OpenSky cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def parse_state_vector(entry: Any) -> Optional[AircraftState]:
    """Convert one positional OpenSky state array into an AircraftState."""

    if not isinstance(entry, (list, tuple)) or len(entry) < _STATE_VECTOR_COLUMNS:
        logger.debug("Skipping malformed state vector: %r", entry)
        return None

    try:
        return AircraftState(
            icao24=entry[0] or "",
            callsign=entry[1],
            origin_country=entry[2] or "",
            time_position=entry[3],
            last_contact=entry[4] or 0,
            longitude=entry[5],
            latitude=entry[6],
            baro_altitude=entry[7],
            on_ground=bool(entry[8]),
            velocity=entry[9],
            true_track=entry[10],
            vertical_rate=entry[11],
            sensors=entry[12],
            geo_altitude=entry[13],
            squawk=entry[14],
            spi=bool(entry[15]),
            position_source=entry[16] or 0,
        )
    except ValidationError as exc:
        logger.debug("Rejected state vector %r: %s", entry[0], exc)
        return None


def parse_states_payload(payload: Any) -> list[AircraftState]:
    """Decode a `/states/all` response body; a missing `states` field means none."""

    raw_states = []
    if isinstance(payload, dict):
        raw_states = payload.get("states") or []

    states: list[AircraftState] = []
    for entry in raw_states:
        state = parse_state_vector(entry)
        if state is not None:
            states.append(state)
    return states


class OpenSkyClient:
    """Shared OpenSky client enforcing a global minimum interval between calls.

    Every outbound request, whichever method issues it, passes the same pacing
    gate. A caller arriving early waits for the interval to elapse; requests
    are never dropped. Failures raise :class:`UpstreamFetchError` and are not
    retried here.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        min_interval: float | None = None,
        auth: tuple[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.base_url = (base_url or settings.opensky_base_url).rstrip("/")
        self.timeout = timeout or settings.opensky_timeout
        self.min_interval = (
            settings.opensky_min_interval if min_interval is None else min_interval
        )
        self.auth = auth
        self.transport = transport
        self._clock = clock
        self._sleep = sleep
        self._gate = asyncio.Lock()
        self._last_request_started: float | None = None

    async def fetch_all(self) -> list[AircraftState]:
        """Fetch every aircraft currently known to OpenSky."""

        payload = await self._request(STATES_PATH)
        states = parse_states_payload(payload)
        logger.debug("Fetched %s aircraft (global)", len(states))
        return states

    async def fetch_in_region(self, region: ViewportRegion) -> list[AircraftState]:
        """Fetch aircraft inside a rectangular region."""

        params = {
            "lamin": region.south,
            "lomin": region.west,
            "lamax": region.north,
            "lomax": region.east,
        }
        payload = await self._request(STATES_PATH, params=params)
        states = parse_states_payload(payload)
        logger.debug("Fetched %s aircraft in %s", len(states), params)
        return states

    async def fetch_by_key(self, icao24: str) -> AircraftState | None:
        """Look up a single aircraft by its ICAO 24-bit address."""

        payload = await self._request(STATES_PATH, params={"icao24": icao24.lower()})
        states = parse_states_payload(payload)
        return states[0] if states else None

    async def _wait_for_slot(self) -> None:
        if self._last_request_started is not None:
            elapsed = self._clock() - self._last_request_started
            wait_time = self.min_interval - elapsed
            if wait_time > 0:
                logger.debug("Pacing OpenSky request for %.2fs", wait_time)
                await self._sleep(wait_time)
        self._last_request_started = self._clock()

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"

        async with self._gate:
            await self._wait_for_slot()
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self.transport, auth=self.auth
                ) as client:
                    response = await client.get(url, params=params)
            except httpx.TimeoutException as exc:
                logger.warning("OpenSky request timed out: %s", exc)
                raise UpstreamFetchError("OpenSky request timed out") from exc
            except httpx.RequestError as exc:
                logger.warning("OpenSky request failed: %s", exc)
                raise UpstreamFetchError(f"OpenSky request failed: {exc}") from exc

        if response.status_code == 429:
            logger.warning("OpenSky rate limit encountered: %s", response.text)
            raise UpstreamFetchError("OpenSky API error: 429 rate limited", status_code=429)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("OpenSky returned HTTP %s: %s", status_code, exc)
            raise UpstreamFetchError(
                f"OpenSky API error: {status_code} {exc.response.reason_phrase}",
                status_code=status_code,
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Failed to parse OpenSky JSON response: %s", exc)
            raise UpstreamFetchError("OpenSky returned an invalid response body") from exc


__all__ = [
    "OpenSkyClient",
    "UpstreamFetchError",
    "parse_state_vector",
    "parse_states_payload",
]
