"""Map viewport models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ViewportRegion(BaseModel):
    """Visible map rectangle in decimal degrees.

    East/west are treated as a plain rectangle; antimeridian wrapping is not
    handled.
    """

    north: float = Field(..., description="Northern latitude bound")
    south: float = Field(..., description="Southern latitude bound")
    east: float = Field(..., description="Eastern longitude bound")
    west: float = Field(..., description="Western longitude bound")

    @model_validator(mode="after")
    def _check_bounds(self) -> "ViewportRegion":
        if self.north <= self.south:
            raise ValueError("north bound must be greater than south bound")
        return self

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lon_span(self) -> float:
        return self.east - self.west

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.south <= latitude <= self.north and self.west <= longitude <= self.east


class BufferedRegion(ViewportRegion):
    """Viewport expanded by a zoom-dependent margin for upstream queries."""

    margin: float = Field(..., description="Fractional margin applied to each side")


class ViewportUpdate(BaseModel):
    """Viewport-change notification sent by the renderer."""

    region: ViewportRegion | None = Field(
        default=None, description="Visible bounds; omit for a global query"
    )
    zoom: int = Field(..., ge=0, le=22, description="Current map zoom level")


__all__ = ["BufferedRegion", "ViewportRegion", "ViewportUpdate"]
