"""Clock-time parsing and instant resolution for Analemma Visualizer.

The solar model needs aware datetimes. This module turns the caller's
configuration (a calendar date, an "HH:MM" clock time and an optional IANA
timezone) into those instants, so the UTC offset is fixed before the model
sees it.
"""

import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class InputValidationError(ValueError):
    """Exception raised for malformed numeric or temporal input."""

    pass


class InvalidTimeOfDayError(InputValidationError):
    """Exception raised when an observation time is not valid HH:MM."""

    pass


TimeOfDay = Union[str, tuple[int, int], time]


def parse_time_of_day(value: TimeOfDay) -> tuple[int, int]:
    """Parse an observation time into (hour, minute).

    Args:
        value: "HH:MM" string (24-hour), (hour, minute) tuple or time object.

    Returns:
        Tuple of hour and minute.

    Raises:
        InvalidTimeOfDayError: If the value cannot be parsed.
    """
    if isinstance(value, time):
        return value.hour, value.minute

    try:
        if isinstance(value, str):
            parts = value.strip().split(":")
            if len(parts) != 2:
                raise ValueError()
            hour, minute = int(parts[0]), int(parts[1])
        else:
            hour, minute = value
            hour, minute = int(hour), int(minute)
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError()
    except (ValueError, TypeError, AttributeError):
        raise InvalidTimeOfDayError(
            f"observation time must be in HH:MM format (24-hour), got '{value}'"
        )

    return hour, minute


def format_time_of_day(hour: int, minute: int) -> str:
    """Format hour and minute as HH:MM."""
    return f"{hour:02d}:{minute:02d}"


def resolve_timezone(name: Optional[str]) -> Optional[ZoneInfo]:
    """Look up an IANA timezone.

    Args:
        name: Timezone name, or None for the host's local time.

    Returns:
        ZoneInfo instance, or None when the host clock should be used.

    Raises:
        InputValidationError: If the name is unknown.
    """
    if name is None:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InputValidationError(f"Invalid timezone: {name}")


def local_instant(
    day: date,
    hour: int,
    minute: int,
    tz: Optional[str] = None,
) -> datetime:
    """Build the aware instant for a wall-clock time on a calendar date.

    With no timezone the host clock's offset at that instant is used,
    daylight saving included.

    Args:
        day: Calendar date.
        hour: Hour of day (0-23).
        minute: Minute (0-59).
        tz: IANA timezone name, or None for host local time.

    Returns:
        Timezone-aware datetime.
    """
    zone = resolve_timezone(tz)
    naive = datetime.combine(day, time(hour, minute))
    if zone is None:
        return naive.astimezone()
    return naive.replace(tzinfo=zone)


def nth_day_of_year(year: int, day: int) -> date:
    """Return the day-th date counted from January 1 (day 1).

    The result may fall in the following year; callers check for rollover.
    """
    return date(year, 1, 1) + timedelta(days=day - 1)


def is_leap_year(year: int) -> bool:
    """Check for a Gregorian leap year."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    """Number of calendar days in a year."""
    return 366 if is_leap_year(year) else 365


def utc_offset_hours(instant: datetime) -> float:
    """UTC offset of an aware datetime in signed hours east of UTC.

    Raises:
        InputValidationError: If the datetime is naive.
    """
    offset = instant.utcoffset()
    if offset is None:
        raise InputValidationError(
            f"instant must be timezone-aware, got naive datetime {instant.isoformat()}"
        )
    return offset.total_seconds() / 3600


def timezone_offset_hours(instant: datetime) -> float:
    """Clock offset in signed hours west of UTC (UTC minus local time).

    New York in winter is +5, Tokyo is -9.

    Raises:
        InputValidationError: If the datetime is naive.
    """
    return -utc_offset_hours(instant)


def require_finite(**values: float) -> None:
    """Check that all numeric inputs are finite.

    Raises:
        InputValidationError: On NaN, infinity or non-numeric values.
    """
    for name, value in values.items():
        try:
            finite = math.isfinite(value)
        except TypeError:
            raise InputValidationError(f"{name} must be a number, got {value!r}")
        if not finite:
            raise InputValidationError(f"{name} must be finite, got {value}")
