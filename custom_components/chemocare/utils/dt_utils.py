# File: utils/dt_utils.py
"""Date and time utilities for ChemoCare.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, re, plus dateutil.

All scheduling happens on local calendar days. Dates are plain
`datetime.date` objects; an event that carries a time of day is a naive
local `datetime.datetime`. Nothing in here converts through UTC.

Functions:
    - set_default_timezone / get_default_timezone: Configure local timezone
    - dt_today_local: Get today's date in local timezone
    - dt_now_local: Get current datetime in local timezone
    - as_date: Truncate a date or datetime to its calendar date
    - day_difference: Whole calendar days between two dates
    - add_days: Calendar-day increment
    - same_calendar_day: Calendar day equality
    - parse_iso_date / format_iso_date: Strict YYYY-MM-DD round trip
    - parse_time_of_day: Lenient "HH:MM" parsing
    - apply_time_of_day: Overlay a time of day onto a date
    - start_of_month: First day of the month containing a date
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
import logging
import re
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
TIME_OF_DAY_SEPARATOR = ":"


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Example:
        datetime.date(2025, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current local wall-clock time as a naive datetime.

    Event start times are naive local datetimes, so "now" is returned in the
    same shape to keep comparisons valid.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).replace(tzinfo=None)


# ==============================================================================
# Calendar Day Arithmetic
# ==============================================================================


def as_date(value: date | datetime) -> date:
    """Truncate a date or datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def day_difference(start: date | datetime, end: date | datetime) -> int:
    """Return the number of whole calendar days from `start` to `end`.

    Both inputs are normalized to their calendar day first, so any time of
    day is ignored and the result is exact across DST transitions.

    Args:
        start: Reference day.
        end: Target day.

    Returns:
        Signed day count, positive when `end` is after `start`.

    Example:
        day_difference(date(2025, 1, 1), date(2025, 1, 15)) -> 14
    """
    return (as_date(end) - as_date(start)).days


def add_days(value: date | datetime, days: int) -> date | datetime:
    """Shift a date (or datetime, keeping its time of day) by whole days."""
    return value + timedelta(days=days)


def same_calendar_day(first: date | datetime, second: date | datetime) -> bool:
    """Return True when both values fall on the same calendar day."""
    return as_date(first) == as_date(second)


def start_of_month(value: date | datetime) -> date:
    """Return the first day of the month containing `value`."""
    return as_date(value) + relativedelta(day=1)


# ==============================================================================
# Parsing and Formatting
# ==============================================================================


def parse_iso_date(value: str) -> date:
    """Parse a strict `YYYY-MM-DD` string into a local calendar date.

    Args:
        value: Date string in ISO calendar format.

    Returns:
        The calendar date.

    Raises:
        ValueError: When the string is not a valid YYYY-MM-DD date.

    Example:
        parse_iso_date("2025-01-20") -> datetime.date(2025, 1, 20)
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected YYYY-MM-DD string, got {type(value).__name__}")
    match = ISO_DATE_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def format_iso_date(value: date | datetime) -> str:
    """Format a date (or the date part of a datetime) as `YYYY-MM-DD`."""
    return as_date(value).isoformat()


def parse_time_of_day(value: str | None) -> tuple[int, int] | None:
    """Parse an "HH:MM" string into an (hours, minutes) pair.

    Parsing is lenient: a missing or non-numeric component counts as zero,
    so "9" is 09:00 and "9:xx" is 09:00. An empty value means no time.

    Returns:
        (hours, minutes) tuple, or None when no time is given.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    parts = text.split(TIME_OF_DAY_SEPARATOR)
    hours = _int_or_zero(parts[0])
    minutes = _int_or_zero(parts[1]) if len(parts) > 1 else 0
    return hours, minutes


def is_valid_time_of_day(value: str) -> bool:
    """Return True for a well formed 24h "HH:MM" value."""
    try:
        time.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        return False
    return len(value.strip()) == 5


def apply_time_of_day(value: date | datetime, time_of_day: str | None) -> date | datetime:
    """Overlay an "HH:MM" time of day onto a calendar date.

    Without a time the calendar date is returned unchanged (an all-day
    value). With a time, a naive local datetime is returned. Out of range
    components roll over (25:00 lands on 01:00 the next day).

    Example:
        apply_time_of_day(date(2025, 1, 1), "09:30")
        -> datetime.datetime(2025, 1, 1, 9, 30)
    """
    parsed = parse_time_of_day(time_of_day)
    if parsed is None:
        return as_date(value)
    hours, minutes = parsed
    midnight = datetime.combine(as_date(value), time.min)
    return midnight + timedelta(hours=hours, minutes=minutes)


def _int_or_zero(text: str) -> int:
    """Convert a numeric string to int, treating anything else as zero."""
    try:
        return int(text.strip())
    except ValueError:
        _LOGGER.debug("DEBUG: Non-numeric time component '%s' treated as 0", text)
        return 0
