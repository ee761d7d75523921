"""
Domain exceptions raised by the itinerary engine and rendered by app.main.
"""
from typing import Optional


class TripwiseError(Exception):
    """Base class for errors surfaced to API clients."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(TripwiseError, ValueError):
    """Rejected client input (trip id, day, time, text fields, cost)."""
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class BudgetExceededError(TripwiseError):
    """A new activity cost does not fit in the trip's remaining budget."""
    status_code = 400

    def __init__(self, result):
        super().__init__(result.message)
        self.result = result


class TripNotFoundError(TripwiseError):
    """Trip does not exist or is not owned by the caller."""
    status_code = 404

    def __init__(self, message: str = "Trip not found"):
        super().__init__(message)


class PersistenceError(TripwiseError):
    """The store failed while reading or writing."""
    status_code = 500
