"""
Activity model: one scheduled, costed item within a trip.
"""
import uuid
from sqlalchemy import Column, String, Numeric, Text
from app.db.base import Base, LenientDateTime, TimestampMixin


class Activity(TimestampMixin, Base):
    """Activity stored with an absolute start time and a cost."""
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Text reference to trips.id; no foreign key because the trip id type varies per deployment
    trip_id = Column(String(64), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    start_time = Column(LenientDateTime, nullable=True, index=True)
    end_time = Column(LenientDateTime, nullable=True)
    cost = Column(Numeric(15, 2), nullable=True, default=0)
