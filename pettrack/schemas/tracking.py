"""
Tracking Schemas

Feed fixes and the transient state a tracking session exposes to observers.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from pettrack.schemas.geo import Coordinates


class LocationFix(BaseModel):
    """A single position reported by the tracking device feed."""

    coordinates: Coordinates
    battery_percent: Optional[int] = Field(None, ge=0, le=100)


class SessionState(str, Enum):
    """Lifecycle of a tracking session."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class TrackingSessionState(BaseModel):
    """Transient per-session state. Never persisted."""

    last_reported_coordinate: Optional[Coordinates] = None
    last_reported_at_ms: Optional[int] = None
    last_persisted_coordinate: Optional[Coordinates] = None
    last_persisted_at_ms: Optional[int] = None
    device_online: bool = False
    battery_percent: int = Field(100, ge=0, le=100)
    last_error: Optional[str] = None


class TrackingStatusResponse(BaseModel):
    pet_id: int
    tracked_entity_id: str
    state: SessionState
    status: TrackingSessionState
