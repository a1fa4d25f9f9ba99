"""Service-layer components for the SkyView backend."""

from .clustering import ClusterResult, SpatialClusterer, haversine_m
from .icon_cache import AircraftIconCache, heading_bucket
from .prioritizer import Prioritizer, budget_for_zoom, score_aircraft
from .repository import AircraftRepository, AircraftSnapshot
from .tracker import FlightTracker
from .viewport import AggregationResult, ViewportAggregator, buffer_region

__all__ = [
    "AggregationResult",
    "AircraftIconCache",
    "AircraftRepository",
    "AircraftSnapshot",
    "ClusterResult",
    "FlightTracker",
    "Prioritizer",
    "SpatialClusterer",
    "ViewportAggregator",
    "budget_for_zoom",
    "buffer_region",
    "haversine_m",
    "heading_bucket",
    "score_aircraft",
]
