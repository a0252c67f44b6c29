"""
Location History Schemas

Persisted history entries and the trail/viewport view built from them.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from pettrack.schemas.geo import Coordinates, MapViewport


class HistoryEntryCreate(BaseModel):
    """A sample accepted for persistence, before it has a row id."""

    coordinates: Coordinates
    captured_at_ms: int = Field(..., ge=0, description="Capture time in epoch milliseconds")


class HistoryEntry(HistoryEntryCreate):
    id: int


class TrailMarker(str, Enum):
    """Role of a point on the rendered trail."""

    START = "start"
    WAYPOINT = "waypoint"
    CURRENT = "current"


class TrailPoint(BaseModel):
    coordinates: Coordinates
    captured_at_ms: int
    marker: TrailMarker


class TrailResponse(BaseModel):
    """Everything a map needs to draw a pet's trail."""

    viewport: MapViewport
    trail: List[TrailPoint] = Field(..., description="Points ordered oldest to newest")
