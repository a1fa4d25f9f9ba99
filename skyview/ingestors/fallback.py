"""Static fallback aircraft used when OpenSky is unreachable at startup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from skyview.ingestors.opensky import parse_state_vector
from skyview.models.aircraft import AircraftState

logger = logging.getLogger("skyview.ingestors.fallback")


def load_fallback_aircraft(path: str | Path) -> list[AircraftState]:
    """Load fallback aircraft from a JSON file.

    The file may hold either an OpenSky-style body (``{"states": [[...], ...]}``)
    or a list of objects keyed by field name. Unreadable files yield an empty
    list so the service still starts.
    """

    fallback_path = Path(path)
    try:
        raw = json.loads(fallback_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to load fallback aircraft from %s: %s", fallback_path, exc)
        return []

    entries = (raw.get("states") or []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        logger.error("Fallback file %s does not contain a list of aircraft", fallback_path)
        return []

    aircraft: list[AircraftState] = []
    for entry in entries:
        if isinstance(entry, dict):
            try:
                aircraft.append(AircraftState.model_validate(entry))
            except ValidationError as exc:
                logger.warning("Skipping invalid fallback aircraft: %s", exc)
            continue
        state = parse_state_vector(entry)
        if state is not None:
            aircraft.append(state)

    logger.info("Loaded %s fallback aircraft from %s", len(aircraft), fallback_path)
    return aircraft


__all__ = ["load_fallback_aircraft"]
