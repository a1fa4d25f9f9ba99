"""Zoom-dependent downsampling of aircraft sets."""

from __future__ import annotations

import logging
import re
import time
from typing import Sequence

from skyview.models.aircraft import AircraftState

logger = logging.getLogger("skyview.prioritizer")

# (max zoom inclusive, aircraft budget)
_ZOOM_BUDGETS: tuple[tuple[int, int], ...] = (
    (4, 200),
    (6, 500),
    (8, 1000),
    (10, 2000),
)
MAX_BUDGET = 5000

_COMMERCIAL_CALLSIGN_RE = re.compile(r"^[A-Z]{2,3}\d")

COMMERCIAL_BONUS = 100.0
ALTITUDE_CAP = 50.0
SPEED_CAP = 30.0
RECENCY_WINDOW_SECONDS = 20.0


def budget_for_zoom(zoom: int) -> int:
    """Maximum number of aircraft to render at a zoom level."""

    for max_zoom, budget in _ZOOM_BUDGETS:
        if zoom <= max_zoom:
            return budget
    return MAX_BUDGET


def is_commercial_callsign(callsign: str | None) -> bool:
    if not callsign:
        return False
    return _COMMERCIAL_CALLSIGN_RE.match(callsign.strip()) is not None


def score_aircraft(aircraft: AircraftState, now: float) -> float:
    """Rank airline traffic, altitude, speed and fresh contact highest."""

    score = 0.0
    if is_commercial_callsign(aircraft.callsign):
        score += COMMERCIAL_BONUS
    if aircraft.baro_altitude is not None:
        score += min(aircraft.baro_altitude / 1000, ALTITUDE_CAP)
    if aircraft.velocity is not None:
        score += min(aircraft.velocity / 10, SPEED_CAP)
    score += max(0.0, RECENCY_WINDOW_SECONDS - (now - aircraft.last_contact))
    return score


class Prioritizer:
    """Truncate an aircraft set to the budget for the current zoom.

    Equal scores keep their input order.
    """

    def select(
        self,
        aircraft: Sequence[AircraftState],
        zoom: int,
        *,
        now: float | None = None,
    ) -> list[AircraftState]:
        budget = budget_for_zoom(zoom)
        if len(aircraft) <= budget:
            return list(aircraft)

        current = time.time() if now is None else now
        scored = [(score_aircraft(a, current), a) for a in aircraft]
        scored.sort(key=lambda item: item[0], reverse=True)
        logger.debug(
            "Downsampled %s aircraft to %s at zoom %s", len(aircraft), budget, zoom
        )
        return [a for _, a in scored[:budget]]


__all__ = [
    "MAX_BUDGET",
    "Prioritizer",
    "budget_for_zoom",
    "is_commercial_callsign",
    "score_aircraft",
]
