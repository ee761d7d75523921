"""
Trip model for itinerary and budget planning.
"""
from sqlalchemy import Column, String, Date, ForeignKey, Integer, Numeric, Text, JSON
from sqlalchemy.orm import relationship
from app.core.config import settings
from app.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    UPCOMING = "upcoming"
    COMPLETED = "completed"


# Status written by older clients; read back as UPCOMING.
LEGACY_PLANNING_STATUS = "planning"


def _trip_id_column() -> Column:
    """Primary key matching the deployed trips table (autoincrement or UUID text)."""
    if settings.TRIP_ID_TYPE == "text":
        return Column(String(36), primary_key=True, index=True)
    return Column(Integer, primary_key=True, index=True)


class Trip(BaseModel):
    """Trip model owned by a single user."""
    __tablename__ = "trips"

    id = _trip_id_column()
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    budget = Column(Numeric(15, 2), nullable=False, default=0)
    companions = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default=TripStatus.UPCOMING.value)  # legacy values tolerated
    image = Column(Text, nullable=True)
    itinerary = Column(JSON, nullable=True)  # Deprecated: superseded by the activities table, never served

    # Relationships
    owner = relationship("User", back_populates="trips")
