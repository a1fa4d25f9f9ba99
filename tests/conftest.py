from __future__ import annotations

from typing import Any

import pytest

from skyview.models import AircraftState

NOW = 1_714_765_200.0


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_aircraft():
    counter = {"n": 0}

    def factory(**overrides: Any) -> AircraftState:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "icao24": f"a{counter['n']:05x}",
            "callsign": None,
            "latitude": 45.0,
            "longitude": -93.0,
            "baro_altitude": None,
            "velocity": None,
            "true_track": 90.0,
            "on_ground": False,
            "last_contact": NOW,
        }
        fields.update(overrides)
        return AircraftState(**fields)

    return factory


class FakeOpenSky:
    """Stands in for OpenSkyClient; queued results are returned or raised in order."""

    def __init__(self, results: list[Any] | None = None) -> None:
        self.results = list(results or [])
        self.by_key: dict[str, Any] = {}
        self.calls: list[tuple[str, Any]] = []

    def _next(self) -> list[AircraftState]:
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def fetch_all(self) -> list[AircraftState]:
        self.calls.append(("all", None))
        return self._next()

    async def fetch_in_region(self, region) -> list[AircraftState]:
        self.calls.append(("region", region))
        return self._next()

    async def fetch_by_key(self, icao24: str):
        self.calls.append(("key", icao24))
        result = self.by_key.get(icao24)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_client():
    return FakeOpenSky([[]])


@pytest.fixture
def now():
    return NOW
