from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pettrack.db.database import Base


class User(Base):
    """A pet owner. Credentials live with the identity provider, not here."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    pets = relationship("Pet", back_populates="owner", cascade="all, delete-orphan")

    def __init__(self, username):
        self.username = username
