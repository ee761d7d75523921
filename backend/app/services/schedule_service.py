"""
Day/time resolver.

Converts between a trip-relative (day, "HH:MM") pair and the absolute start
time stored on an activity. The forward direction guards new writes and
rejects bad input; the inverse reads existing rows and never raises.
"""
import logging
import re
from datetime import date, datetime, time as dt_time, timedelta
from typing import Optional, Tuple, Union
from app.core.config import settings
from app.core.exceptions import InputValidationError

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")
TIME_FORMAT_MESSAGE = "Invalid time format. Please use HH:MM format (e.g., 14:30)"


def validate_day(day) -> int:
    """Return day as an int in [1, MAX_ACTIVITY_DAY]."""
    if day is None or (isinstance(day, str) and not day.strip()):
        raise InputValidationError("Day is required", field="day")
    range_message = f"Day must be an integer between 1 and {settings.MAX_ACTIVITY_DAY}"
    if isinstance(day, bool):
        raise InputValidationError(range_message, field="day")
    if isinstance(day, float):
        if not day.is_integer():
            raise InputValidationError(range_message, field="day")
        day = int(day)
    elif not isinstance(day, int):
        try:
            day = int(str(day).strip())
        except ValueError:
            raise InputValidationError(range_message, field="day")
    if day < 1 or day > settings.MAX_ACTIVITY_DAY:
        raise InputValidationError(range_message, field="day")
    return day


def parse_time_of_day(value) -> Tuple[int, int]:
    """Parse "HH:MM" or "HH:MM:SS" (24-hour) into (hour, minute)."""
    if value is None:
        raise InputValidationError("Time is required", field="time")
    text = str(value).strip()
    if not text:
        raise InputValidationError("Time is required", field="time")
    match = TIME_PATTERN.match(text)
    if not match:
        raise InputValidationError(TIME_FORMAT_MESSAGE, field="time")
    return int(match.group(1)), int(match.group(2))


def to_timestamp(trip_start_date: Optional[date], day, time) -> datetime:
    """
    Absolute start time for day `day` (1 = trip start date) at `time`.

    Seconds in "HH:MM:SS" input are accepted but dropped; the stored
    timestamp carries hour and minute only.
    """
    if trip_start_date is None:
        raise InputValidationError(
            "Trip start date is missing. Please update the trip first.", field="startDate"
        )
    if isinstance(trip_start_date, datetime):
        trip_start_date = trip_start_date.date()
    day_number = validate_day(day)
    hour, minute = parse_time_of_day(time)
    activity_date = trip_start_date + timedelta(days=day_number - 1)
    return datetime.combine(activity_date, dt_time(hour, minute))


def coerce_timestamp(value) -> Optional[datetime]:
    """Best-effort datetime from a stored value; None when unusable."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, dt_time())
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def _coerce_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    stamp = coerce_timestamp(value)
    return stamp.date() if stamp else None


def from_timestamp(trip_start_date, timestamp: Union[datetime, str, None]) -> Tuple[int, str]:
    """
    Trip-relative (day, "HH:MM") for a stored start time.

    Days before the trip start clamp to 1. An unparseable timestamp or start
    date yields (1, "").
    """
    stamp = coerce_timestamp(timestamp)
    start = _coerce_date(trip_start_date)
    if stamp is None or start is None:
        logger.warning(f"Cannot resolve activity time {timestamp!r} against trip start {trip_start_date!r}")
        return 1, ""
    day = max(1, (stamp.date() - start).days + 1)
    return day, f"{stamp.hour:02d}:{stamp.minute:02d}"
