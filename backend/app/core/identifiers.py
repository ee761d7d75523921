"""
Trip identifier policy.

Trip ids are autoincrement integers in some deployments and UUID strings in
others. The policy is an immutable value built from settings and handed to
whatever needs it, so the behaviour is fixed per instance.
"""
import uuid
from dataclasses import dataclass
from typing import Optional, Union
from app.core.exceptions import InputValidationError

TripId = Union[int, str]


@dataclass(frozen=True)
class TripIdPolicy:
    """How trip ids are parsed, generated and referenced."""
    uses_text: bool = False

    @classmethod
    def from_settings(cls, settings) -> "TripIdPolicy":
        return cls(uses_text=settings.TRIP_ID_TYPE == "text")

    def parse(self, raw) -> TripId:
        """Parse a trip id taken from a URL path or request body."""
        value = str(raw).strip() if raw is not None else ""
        if not value:
            raise InputValidationError("Trip ID is required", field="tripId")
        if self.uses_text:
            return value
        try:
            return int(value)
        except ValueError:
            raise InputValidationError(f"Invalid trip ID format: {raw}", field="tripId")

    def new_id(self) -> Optional[str]:
        """Id for a new trip row; None lets the database assign one."""
        if self.uses_text:
            return str(uuid.uuid4())
        return None

    @staticmethod
    def activity_ref(trip_id: TripId) -> str:
        """Text form stored in Activity.trip_id."""
        return str(trip_id)
