"""Models for aircraft state vectors received from OpenSky."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AircraftState(BaseModel):
    """One aircraft as reported by the upstream state-vector feed.

    Instances are replaced, never mutated, on every poll. Units are those of
    the OpenSky REST API (metres, metres per second, degrees).
    """

    icao24: str = Field(..., description="Lowercase ICAO 24-bit hex address")
    callsign: Optional[str] = Field(default=None, description="Aircraft callsign")
    origin_country: str = Field(default="", description="Country of registration")
    time_position: Optional[float] = Field(
        default=None, description="Epoch seconds of the last position update"
    )
    last_contact: float = Field(
        default=0, description="Epoch seconds of the last message received"
    )
    longitude: Optional[float] = Field(default=None, description="WGS-84 longitude")
    latitude: Optional[float] = Field(default=None, description="WGS-84 latitude")
    baro_altitude: Optional[float] = Field(
        default=None, description="Barometric altitude in metres"
    )
    on_ground: bool = Field(default=False, description="Whether the aircraft is grounded")
    velocity: Optional[float] = Field(
        default=None, description="Ground speed in metres per second"
    )
    true_track: Optional[float] = Field(
        default=None, description="Track angle in degrees clockwise from north"
    )
    vertical_rate: Optional[float] = Field(
        default=None, description="Vertical rate in metres per second"
    )
    sensors: Optional[tuple[int, ...]] = Field(
        default=None, description="Receiver ids that contributed to this vector"
    )
    geo_altitude: Optional[float] = Field(
        default=None, description="Geometric altitude in metres"
    )
    squawk: Optional[str] = Field(default=None, description="Transponder code")
    spi: bool = Field(default=False, description="Special purpose indicator")
    position_source: int = Field(default=0, description="Origin of the position")

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("icao24")
    @classmethod
    def _lowercase_icao(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("callsign")
    @classmethod
    def _strip_callsign(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "AircraftState":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be present or both absent")
        return self

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def is_placeable(self) -> bool:
        """True when the aircraft may be drawn on the map."""

        return self.has_position and not self.on_ground


__all__ = ["AircraftState"]
