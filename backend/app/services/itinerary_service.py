"""
Itinerary projector: derives the day/time annotated itinerary and budget
totals of a trip from its stored activities.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence
from app.services.budget_service import compute_totals, parse_monetary_value
from app.services.schedule_service import coerce_timestamp, from_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItineraryEntry:
    """One activity as seen by clients."""
    id: str
    day: int
    time: str
    activity: str
    location: str
    budget: Decimal
    created_at: Optional[datetime]


@dataclass(frozen=True)
class ItineraryProjection:
    itinerary: List[ItineraryEntry] = field(default_factory=list)
    total_spent: Decimal = Decimal(0)
    remaining_budget: Decimal = Decimal(0)


def _chronological(activities: Sequence) -> list:
    """Stable sort by start time; rows with an unusable start time go last."""
    def key(activity):
        stamp = coerce_timestamp(getattr(activity, "start_time", None))
        if stamp is None:
            return (1, datetime.min)
        # Aware and naive datetimes cannot be compared; order on wall-clock time.
        return (0, stamp.replace(tzinfo=None))
    return sorted(activities, key=key)


def project_activity(trip_start_date, activity) -> ItineraryEntry:
    day, time = from_timestamp(trip_start_date, activity.start_time)
    created_at = coerce_timestamp(activity.created_at) or coerce_timestamp(activity.start_time)
    return ItineraryEntry(
        id=str(activity.id),
        day=day,
        time=time,
        activity=activity.title or "",
        location=activity.location or "",
        budget=parse_monetary_value(activity.cost),
        created_at=created_at,
    )


def project_itinerary(trip, activities: Sequence) -> ItineraryProjection:
    """
    Build the itinerary for `trip` from all of its activities.

    An activity that cannot be projected is left out of the itinerary but its
    cost still counts toward the totals.
    """
    ordered = _chronological(activities)
    entries = []
    for activity in ordered:
        try:
            entries.append(project_activity(trip.start_date, activity))
        except Exception as e:
            logger.warning(
                f"Dropping activity {getattr(activity, 'id', None)!r} from trip {trip.id!r} itinerary: {e}"
            )

    totals = compute_totals(trip.budget, [getattr(activity, "cost", None) for activity in ordered])
    return ItineraryProjection(
        itinerary=entries,
        total_spent=totals.total_spent,
        remaining_budget=totals.remaining_budget,
    )
