"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional, Union
from datetime import date, datetime
from app.core.config import settings
from app.models.trip import TripStatus, LEGACY_PLANNING_STATUS
from app.schemas.activity import ItineraryItem


class TripBase(BaseModel):
    """Base trip schema."""
    title: str = Field(min_length=1, max_length=settings.MAX_TRIP_TITLE_LENGTH)
    destination: str = Field(min_length=1, max_length=settings.MAX_TRIP_DESTINATION_LENGTH)
    start_date: date
    end_date: date
    budget: Union[float, str]  # Number or currency string such as "₱50,000"
    companions: int = Field(default=1, ge=1)
    status: Optional[str] = TripStatus.UPCOMING.value
    image: Optional[str] = None
    itinerary: Optional[Any] = None  # Deprecated itinerary blob from older clients

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    @field_validator("budget")
    @classmethod
    def check_budget(cls, v):
        """Budget must be present and short enough to be a sane amount."""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("Budget is required")
            if len(v) > settings.MAX_TRIP_BUDGET_LENGTH:
                raise ValueError(f"Budget must be {settings.MAX_TRIP_BUDGET_LENGTH} characters or less")
        elif v < 0:
            raise ValueError("Budget cannot be negative")
        return v

    @field_validator("image")
    @classmethod
    def check_image(cls, v):
        if v and len(v) > settings.MAX_TRIP_IMAGE_LENGTH:
            raise ValueError(f"Image data is too large (max {settings.MAX_TRIP_IMAGE_LENGTH:,} characters)")
        return v

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v):
        """Map the legacy "planning" status and reject unknown ones."""
        if v is None or v == "":
            return TripStatus.UPCOMING.value
        value = v.lower()
        if value == LEGACY_PLANNING_STATUS:
            return TripStatus.UPCOMING.value
        if value not in {s.value for s in TripStatus}:
            raise ValueError(f"Status must be one of: {', '.join(s.value for s in TripStatus)}")
        return value

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("Start date must be on or before end date")
        return self


class TripCreate(TripBase):
    """Schema for trip creation."""
    pass


class TripUpdate(TripBase):
    """Schema for trip update (full replacement, like creation)."""
    pass


class TripResponse(BaseModel):
    """Assembled trip: stored fields merged with the live itinerary and totals."""
    id: Union[int, str]
    title: str
    destination: str
    start_date: date
    end_date: date
    budget: str  # Display string, e.g. "₱50,000"
    companions: int
    status: str
    image: str
    itinerary: List[ItineraryItem] = []
    remaining_budget: float
    total_spent: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TripEnvelope(BaseModel):
    """Single-trip response body."""
    trip: TripResponse


class TripListResponse(BaseModel):
    """Trip list response body."""
    trips: List[TripResponse] = []
