"""Upstream data sources for SkyView."""

from .fallback import load_fallback_aircraft
from .opensky import OpenSkyClient, UpstreamFetchError, parse_state_vector, parse_states_payload

__all__ = [
    "OpenSkyClient",
    "UpstreamFetchError",
    "load_fallback_aircraft",
    "parse_state_vector",
    "parse_states_payload",
]
