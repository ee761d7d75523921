"""
Trip aggregate assembler: merges a stored trip with its projected itinerary
into the representation returned by the API.
"""
import json
import logging
from datetime import date, datetime
from typing import Dict, List, Sequence
from app.core.config import settings
from app.models.trip import TripStatus, LEGACY_PLANNING_STATUS
from app.schemas.activity import ItineraryItem
from app.schemas.trip import TripResponse
from app.services.budget_service import format_budget_display
from app.services.itinerary_service import ItineraryProjection, project_itinerary

logger = logging.getLogger(__name__)


def normalize_status(value) -> str:
    """Canonical status for output; "planning" was renamed to "upcoming"."""
    if not value:
        return TripStatus.UPCOMING.value
    status = str(value)
    if status == LEGACY_PLANNING_STATUS:
        return TripStatus.UPCOMING.value
    return status


def trip_image(value) -> str:
    return value if value else settings.DEFAULT_TRIP_IMAGE


def normalize_legacy_itinerary(value) -> list:
    """
    Coerce the deprecated itinerary blob to a list for storage.
    It is kept for old clients but never served.
    """
    if not value:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError as e:
            logger.warning(f"Failed to parse itinerary JSON, defaulting to empty list: {e}")
            return []
        return parsed if isinstance(parsed, list) else []
    return []


def assemble_trip(trip, projection: ItineraryProjection) -> TripResponse:
    """Build the API representation of `trip` from its live projection."""
    return TripResponse(
        id=trip.id,
        title=trip.title,
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        budget=format_budget_display(trip.budget),
        companions=trip.companions if trip.companions is not None else 1,
        status=normalize_status(trip.status),
        image=trip_image(trip.image),
        itinerary=[
            ItineraryItem(
                id=entry.id,
                day=entry.day,
                time=entry.time,
                activity=entry.activity,
                location=entry.location,
                budget=float(entry.budget),
                created_at=entry.created_at,
            )
            for entry in projection.itinerary
        ],
        remaining_budget=float(projection.remaining_budget),
        total_spent=float(projection.total_spent),
        created_at=trip.created_at,
        updated_at=trip.updated_at,
    )


def _date_or_today(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.today()


def placeholder_trip(trip) -> TripResponse:
    """Minimal valid representation for a trip whose row could not be assembled."""
    now = datetime.utcnow()
    companions = getattr(trip, "companions", None)
    created_at = getattr(trip, "created_at", None)
    updated_at = getattr(trip, "updated_at", None)
    return TripResponse(
        id=getattr(trip, "id", None) or "",
        title=str(getattr(trip, "title", None) or "Untitled Trip"),
        destination=str(getattr(trip, "destination", None) or ""),
        start_date=_date_or_today(getattr(trip, "start_date", None)),
        end_date=_date_or_today(getattr(trip, "end_date", None)),
        budget=format_budget_display(0),
        companions=companions if isinstance(companions, int) else 1,
        status=normalize_status(getattr(trip, "status", None)),
        image=trip_image(getattr(trip, "image", None)),
        itinerary=[],
        remaining_budget=0.0,
        total_spent=0.0,
        created_at=created_at if isinstance(created_at, datetime) else now,
        updated_at=updated_at if isinstance(updated_at, datetime) else now,
    )


def project_trip(trip, activities: Sequence) -> TripResponse:
    """Project and assemble one trip; a broken row degrades to a placeholder."""
    try:
        return assemble_trip(trip, project_itinerary(trip, activities))
    except Exception as e:
        logger.error(f"Error assembling trip {getattr(trip, 'id', None)!r}: {e}", exc_info=True)
        return placeholder_trip(trip)


def project_trips(trips: Sequence, activities_by_trip: Dict[str, list]) -> List[TripResponse]:
    """Assemble every trip with the activities referencing it."""
    return [
        project_trip(trip, activities_by_trip.get(str(trip.id), []))
        for trip in trips
    ]
