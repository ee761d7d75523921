"""
Activity scheduling: the add-activity write path.

Reads the trip's committed spend, checks the new cost against it, resolves
the start time and inserts the activity inside one transaction that holds a
row lock on the trip, so concurrent additions to the same trip cannot both
pass the budget check.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from app.core.config import settings
from app.core.exceptions import (
    InputValidationError, BudgetExceededError, PersistenceError, TripNotFoundError
)
from app.core.identifiers import TripId
from app.db.repositories import TripStore
from app.schemas.activity import ActivityCreate
from app.schemas.trip import TripResponse
from app.services.budget_service import compute_totals, parse_cost_input, validate_proposed_spend
from app.services.schedule_service import parse_time_of_day, to_timestamp, validate_day
from app.services.trip_service import project_trip

logger = logging.getLogger(__name__)


def clean_text(value, field: str, label: str) -> str:
    """Required free-text field, trimmed and length-bounded."""
    if value is None:
        raise InputValidationError(f"{label} is required", field=field)
    text = str(value).strip()
    if not text:
        raise InputValidationError(f"{label} cannot be empty", field=field)
    if len(text) > settings.MAX_ACTIVITY_TEXT_LENGTH:
        raise InputValidationError(
            f"{label} must be {settings.MAX_ACTIVITY_TEXT_LENGTH} characters or less", field=field
        )
    return text


def _check_budget(store: TripStore, trip, cost) -> None:
    """Raise BudgetExceededError if cost does not fit; skip the check if it cannot be computed."""
    try:
        totals = compute_totals(trip.budget, store.activity_costs(trip.id))
        result = validate_proposed_spend(totals, cost)
    except (ArithmeticError, TypeError, ValueError):
        logger.exception(f"Budget calculation failed for trip {trip.id!r}; continuing without budget validation")
        return
    if result is not None:
        logger.info(
            f"Rejected activity for trip {trip.id!r}: cost {cost} > remaining {totals.remaining_budget}"
        )
        raise BudgetExceededError(result)


def add_activity(store: TripStore, trip_id: TripId, owner_id: int, payload: ActivityCreate) -> TripResponse:
    """
    Add an activity to a trip and return the re-assembled trip.

    Raises InputValidationError, BudgetExceededError, TripNotFoundError or
    PersistenceError.
    """
    day = validate_day(payload.day)
    parse_time_of_day(payload.time)
    title = clean_text(payload.activity, "activity", "Activity name")
    location = clean_text(payload.location, "location", "Location")
    cost = parse_cost_input(payload.budget)

    try:
        trip = store.get_trip(trip_id, owner_id, for_update=True)
        if trip is None:
            raise TripNotFoundError(
                "Trip not found or you do not have permission to add activities to this trip"
            )

        if cost > 0:
            _check_budget(store, trip, cost)

        start_time = to_timestamp(trip.start_date, day, payload.time)
        activity = store.insert_activity(trip.id, title, location, start_time, cost)
        store.commit()
    except (InputValidationError, BudgetExceededError, TripNotFoundError):
        store.rollback()
        raise
    except SQLAlchemyError as e:
        store.rollback()
        logger.error(f"Database error adding activity to trip {trip_id!r}: {e}", exc_info=True)
        raise PersistenceError("Failed to create activity")

    try:
        activities = store.list_activities(trip.id)
    except SQLAlchemyError as e:
        logger.error(f"Database error reloading activities of trip {trip_id!r}: {e}", exc_info=True)
        raise PersistenceError("Activity created but the trip could not be reloaded")

    assembled = project_trip(trip, activities)
    logger.info(
        f"Activity {activity.id} created for trip {trip.id!r} - "
        f"total: {trip.budget}, spent: {assembled.total_spent}, remaining: {assembled.remaining_budget}"
    )
    return assembled
