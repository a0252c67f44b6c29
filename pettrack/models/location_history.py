from sqlalchemy import BigInteger, Column, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from pettrack.db.database import Base


class LocationHistoryEntry(Base):
    """One persisted position of a pet. Rows are independent and never updated."""

    __tablename__ = "location_history"
    __table_args__ = (
        Index("ix_location_history_pet_id_captured_at_ms", "pet_id", "captured_at_ms"),
    )

    id = Column(Integer, primary_key=True, index=True)
    pet_id = Column(
        Integer, ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    captured_at_ms = Column(BigInteger, nullable=False)

    pet = relationship("Pet", back_populates="location_history")

    def __init__(self, pet_id, latitude, longitude, captured_at_ms):
        self.pet_id = pet_id
        self.latitude = latitude
        self.longitude = longitude
        self.captured_at_ms = captured_at_ms
