from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pettrack.db.database import Base


class Pet(Base):
    __tablename__ = "pets"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    species = Column(String, nullable=True)
    breed = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    profile_image_ref = Column(String, nullable=True)
    tracker_device_id = Column(String, nullable=True)

    owner_name = Column(String, nullable=True)
    owner_address = Column(String, nullable=True)
    owner_email = Column(String, nullable=True)
    owner_phone = Column(String, nullable=True)

    is_missing = Column(Boolean, nullable=False, default=False)
    last_seen_latitude = Column(Float, nullable=True)
    last_seen_longitude = Column(Float, nullable=True)
    last_seen_at_ms = Column(BigInteger, nullable=True)
    missing_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", back_populates="pets")
    location_history = relationship(
        "LocationHistoryEntry",
        back_populates="pet",
        cascade="all, delete-orphan",
    )

    def __init__(self, owner_id, name, **profile):
        self.owner_id = owner_id
        self.name = name
        self.is_missing = False
        for field, value in profile.items():
            setattr(self, field, value)
