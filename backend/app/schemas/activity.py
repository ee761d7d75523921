"""
Pydantic schemas for activities and itinerary items.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime


class ActivityCreate(BaseModel):
    """
    Schema for adding an activity to a trip.

    Fields are kept loose on purpose: the scheduling service validates them
    and reports field-specific errors.
    """
    day: Any = None
    time: Any = None
    activity: Any = None
    location: Any = None
    budget: Any = None  # Cost of the activity


class ItineraryItem(BaseModel):
    """Client-facing projection of one activity."""
    id: str
    day: int
    time: str
    activity: str
    location: str
    budget: float
    created_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BudgetErrorResponse(BaseModel):
    """Error payload for rejected activities."""
    error: str
    field: Optional[str] = None
    remaining_budget: Optional[float] = None
    total_budget: Optional[float] = None
    total_spent: Optional[float] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
