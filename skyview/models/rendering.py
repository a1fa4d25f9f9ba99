"""Renderer-facing models: clusters, icons and snapshot payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from skyview.models.aircraft import AircraftState


class ClusterSize(str, Enum):
    """Size bucket for a cluster marker."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ClusterSummary(BaseModel):
    """Group of nearby aircraft rendered as a single marker."""

    cluster_id: str = Field(..., description="Identifier unique within one snapshot")
    latitude: float = Field(..., description="Mean latitude of the members")
    longitude: float = Field(..., description="Mean longitude of the members")
    members: list[AircraftState] = Field(..., min_length=2)
    size: ClusterSize = Field(..., description="Marker size bucket")

    model_config = ConfigDict(frozen=True)

    @property
    def count(self) -> int:
        return len(self.members)


class IconDescriptor(BaseModel):
    """Pre-rendered aircraft marker icon."""

    heading_bucket: int = Field(..., description="Heading rounded to 10 degrees")
    selected: bool = Field(..., description="Whether this is the selected-state icon")
    rotation: float = Field(..., description="Rotation applied to the glyph in degrees")
    svg: str = Field(..., description="SVG markup of the icon")
    icon_url: str = Field(..., description="Base64 data URL of the SVG")
    icon_size: tuple[int, int]
    icon_anchor: tuple[int, int]
    popup_anchor: tuple[int, int]

    model_config = ConfigDict(frozen=True)


class IconCacheStats(BaseModel):
    size: int
    max_size: int
    entries: list[str]


class TrackerStatus(BaseModel):
    """Refresh status shown alongside the snapshot."""

    loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


class SnapshotStats(BaseModel):
    total_aircraft: int
    max_for_zoom: int
    zoom: int


class SnapshotResponse(BaseModel):
    """Everything the renderer needs for the current cycle."""

    aircraft: list[AircraftState] = Field(
        default_factory=list, description="Aircraft rendered as individual markers"
    )
    clusters: list[ClusterSummary] = Field(default_factory=list)
    status: TrackerStatus
    stats: SnapshotStats


__all__ = [
    "ClusterSize",
    "ClusterSummary",
    "IconCacheStats",
    "IconDescriptor",
    "SnapshotResponse",
    "SnapshotStats",
    "TrackerStatus",
]
