"""
Trip management routes: trip lifecycle, itinerary reads and activity scheduling.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from app.api.dependencies import get_current_user, get_trip_id_policy, get_trip_store
from app.core.config import settings
from app.core.exceptions import InputValidationError, PersistenceError, TripNotFoundError
from app.core.identifiers import TripIdPolicy
from app.db.repositories import TripStore
from app.models.trip import Trip
from app.models.user import User
from app.schemas.activity import ActivityCreate, BudgetErrorResponse
from app.schemas.trip import TripCreate, TripEnvelope, TripListResponse, TripUpdate
from app.services.activity_service import add_activity
from app.services.budget_service import parse_monetary_value
from app.services.trip_service import normalize_legacy_itinerary, project_trip, project_trips

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


def check_trip_access(trip_id: str, user_id: int, store: TripStore, id_policy: TripIdPolicy) -> Trip:
    """Return the caller's trip or raise TripNotFoundError."""
    trip = store.get_trip(id_policy.parse(trip_id), user_id)
    if not trip:
        raise TripNotFoundError()
    return trip


def trip_fields(trip_data: TripCreate) -> dict:
    """Normalized column values for a create/update body."""
    budget = parse_monetary_value(trip_data.budget)
    if budget < 0:
        raise InputValidationError("Budget cannot be negative", field="budget")
    return {
        "title": trip_data.title,
        "destination": trip_data.destination,
        "start_date": trip_data.start_date,
        "end_date": trip_data.end_date,
        "budget": budget,
        "companions": trip_data.companions,
        "status": trip_data.status,
        "image": trip_data.image or settings.DEFAULT_TRIP_IMAGE,
        "itinerary": normalize_legacy_itinerary(trip_data.itinerary),
    }


@router.get("", response_model=TripListResponse)
async def list_trips(
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_trip_store)
):
    """List all trips for current user with their live itineraries."""
    try:
        trips = store.list_trips(current_user.id)
        activities = store.list_activities_for_owner(current_user.id) if trips else {}
    except SQLAlchemyError as e:
        logger.error(f"Error fetching trips for user {current_user.id}: {e}", exc_info=True)
        raise PersistenceError("Failed to load trips")

    logger.debug(f"Found {len(trips)} trips and {sum(len(a) for a in activities.values())} activities")
    return TripListResponse(trips=project_trips(trips, activities))


@router.post("", response_model=TripEnvelope, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_trip_store)
):
    """Create a new trip."""
    fields = trip_fields(trip_data)
    try:
        trip = store.create_trip(owner_id=current_user.id, **fields)
        store.commit()
    except SQLAlchemyError as e:
        store.rollback()
        logger.error(f"Error creating trip for user {current_user.id}: {e}", exc_info=True)
        raise PersistenceError("Failed to create trip")

    logger.info(f"Trip {trip.id!r} created for user {current_user.id}")
    return TripEnvelope(trip=project_trip(trip, []))


@router.get("/{trip_id}", response_model=TripEnvelope)
async def get_trip(
    trip_id: str,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_trip_store),
    id_policy: TripIdPolicy = Depends(get_trip_id_policy)
):
    """Get trip details with its itinerary."""
    trip = check_trip_access(trip_id, current_user.id, store, id_policy)
    return TripEnvelope(trip=project_trip(trip, store.list_activities(trip.id)))


@router.put("/{trip_id}", response_model=TripEnvelope)
async def update_trip(
    trip_id: str,
    trip_data: TripUpdate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_trip_store),
    id_policy: TripIdPolicy = Depends(get_trip_id_policy)
):
    """
    Update a trip.

    Lowering the budget below what activities already cost is allowed; the
    remaining budget is then reported as negative.
    """
    trip = check_trip_access(trip_id, current_user.id, store, id_policy)
    fields = trip_fields(trip_data)
    try:
        store.update_trip(trip, **fields)
        store.commit()
    except SQLAlchemyError as e:
        store.rollback()
        logger.error(f"Error updating trip {trip_id!r}: {e}", exc_info=True)
        raise PersistenceError("Failed to update trip")

    return TripEnvelope(trip=project_trip(trip, store.list_activities(trip.id)))


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: str,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_trip_store),
    id_policy: TripIdPolicy = Depends(get_trip_id_policy)
):
    """Delete a trip together with its activities."""
    trip = check_trip_access(trip_id, current_user.id, store, id_policy)
    try:
        store.delete_trip(trip)
        store.commit()
    except SQLAlchemyError as e:
        store.rollback()
        logger.error(f"Error deleting trip {trip_id!r}: {e}", exc_info=True)
        raise PersistenceError("Failed to delete trip")

    return {"message": "Trip deleted successfully"}


@router.post(
    "/{trip_id}/activities",
    response_model=TripEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": BudgetErrorResponse}, 404: {"model": BudgetErrorResponse}},
)
async def create_activity(
    trip_id: str,
    activity_data: ActivityCreate,
    current_user: User = Depends(get_current_user),
    store: TripStore = Depends(get_trip_store),
    id_policy: TripIdPolicy = Depends(get_trip_id_policy)
):
    """Add an activity to a trip and return the trip with its updated itinerary."""
    trip = add_activity(store, id_policy.parse(trip_id), current_user.id, activity_data)
    return TripEnvelope(trip=trip)
