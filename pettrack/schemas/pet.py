"""
Pet Schemas

Request/response models for pet records, and the `TrackedPet` record the
missing report workflow transforms.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pettrack.schemas.geo import Coordinates

# Device ids end up as a path segment of the feed URL
DEVICE_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class PetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    species: Optional[str] = None
    breed: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=100)
    profile_image_ref: Optional[str] = Field(
        None, description="Blob store reference of the profile picture"
    )
    tracker_device_id: Optional[str] = Field(
        None,
        max_length=64,
        pattern=DEVICE_ID_PATTERN,
        description="Feed id of the tracking device, defaults to the pet id",
    )
    owner_name: Optional[str] = None
    owner_address: Optional[str] = None
    owner_email: Optional[str] = None
    owner_phone: Optional[str] = None


class PetCreate(PetBase):
    pass


class PetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    species: Optional[str] = None
    breed: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=100)
    profile_image_ref: Optional[str] = None
    tracker_device_id: Optional[str] = Field(None, max_length=64, pattern=DEVICE_ID_PATTERN)
    owner_name: Optional[str] = None
    owner_address: Optional[str] = None
    owner_email: Optional[str] = None
    owner_phone: Optional[str] = None


class PetResponse(PetBase):
    id: int
    is_missing: bool
    last_seen_latitude: Optional[float] = None
    last_seen_longitude: Optional[float] = None
    last_seen_at_ms: Optional[int] = None
    missing_notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TrackedPet(BaseModel):
    """
    The slice of a pet record the tracking core works with.

    A pet that is not missing never carries last-seen data.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    profile_image_ref: Optional[str] = None
    is_missing: bool = False
    last_seen_coordinate: Optional[Coordinates] = None
    last_seen_at_ms: Optional[int] = None
    missing_notes: Optional[str] = None

    @model_validator(mode="after")
    def check_missing_fields(self) -> "TrackedPet":
        """Reject last-seen fields on a pet that is not missing."""
        if not self.is_missing and (
            self.last_seen_coordinate is not None
            or self.last_seen_at_ms is not None
            or self.missing_notes is not None
        ):
            raise ValueError("A pet that is not missing cannot carry last-seen data")
        return self


class MissingReportCreate(BaseModel):
    """Request schema for reporting a pet missing."""

    last_seen_coordinates: Optional[Coordinates] = Field(
        None, description="Where the pet was last seen"
    )
    last_seen_at: Optional[datetime] = Field(
        None, description="When the pet was last seen (ISO format)"
    )
    notes: str = Field("", description="Additional information, e.g. notable behavior")
