"""Pydantic models for the SkyView backend."""

from .aircraft import AircraftState
from .rendering import (
    ClusterSize,
    ClusterSummary,
    IconCacheStats,
    IconDescriptor,
    SnapshotResponse,
    SnapshotStats,
    TrackerStatus,
)
from .viewport import BufferedRegion, ViewportRegion, ViewportUpdate

__all__ = [
    "AircraftState",
    "BufferedRegion",
    "ClusterSize",
    "ClusterSummary",
    "IconCacheStats",
    "IconDescriptor",
    "SnapshotResponse",
    "SnapshotStats",
    "TrackerStatus",
    "ViewportRegion",
    "ViewportUpdate",
]
