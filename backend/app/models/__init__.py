"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.trip import Trip, TripStatus
from app.models.activity import Activity

__all__ = [
    "User",
    "Trip",
    "TripStatus",
    "Activity",
]
