"""
Location and Coordinate Type Definitions

Pydantic models for geographic coordinates and the map viewport derived
from them.
"""

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """
    Geographic coordinates (latitude and longitude).

    Immutable: a coordinate is a value, never edited in place.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"


class MapViewport(BaseModel):
    """Map center plus the latitude/longitude spans needed to frame a set of points."""

    center: Coordinates
    latitude_span: float = Field(..., gt=0, description="Latitude span in degrees")
    longitude_span: float = Field(..., gt=0, description="Longitude span in degrees")
