"""
Timezone utilities for multical.

Pure conversions between naive wall-clock datetimes in IANA zones.
Calendars store naive local times; these helpers move them through UTC
when an event crosses from one calendar's zone into another's.
"""

from datetime import datetime
from typing import Optional
import pytz

from .exceptions import InvalidArgumentError, InvalidTimezoneError


# Default timezone for calendars created without an explicit zone
_default_timezone_name: str = "America/New_York"


def set_default_timezone(timezone_name: str):
    """Set the zone used by create_calendar_with_default_timezone()."""
    global _default_timezone_name
    get_timezone(timezone_name)
    _default_timezone_name = timezone_name


def get_default_timezone() -> str:
    return _default_timezone_name


def get_timezone(zone_id: Optional[str]):
    """
    Look up a pytz timezone by IANA identifier.

    Raises:
        InvalidTimezoneError: if the id is None, blank or unknown.
    """
    if zone_id is None or not str(zone_id).strip():
        raise InvalidTimezoneError("Timezone cannot be null or empty")
    try:
        return pytz.timezone(str(zone_id).strip())
    except pytz.UnknownTimeZoneError:
        raise InvalidTimezoneError(f"Invalid timezone: {zone_id}")


def is_valid_timezone(zone_id: Optional[str]) -> bool:
    try:
        get_timezone(zone_id)
    except InvalidTimezoneError:
        return False
    return True


def _check_naive(dt: datetime) -> None:
    if not isinstance(dt, datetime):
        raise InvalidArgumentError(f"Expected a datetime, got {type(dt).__name__}")
    if dt.tzinfo is not None:
        raise InvalidArgumentError("Expected a naive datetime (no tzinfo)")


def localize(dt: datetime, zone_id: str) -> datetime:
    """
    Attach a zone to a naive wall-clock datetime.

    Ambiguous times (DST fall-back) take the earlier, DST offset.
    Non-existent times (spring-forward gap) are read with the offset in
    force before the transition, which moves them forward by the gap.
    """
    tz = get_timezone(zone_id)
    try:
        return tz.localize(dt, is_dst=None)
    except pytz.AmbiguousTimeError:
        return tz.localize(dt, is_dst=True)
    except pytz.NonExistentTimeError:
        return tz.normalize(tz.localize(dt, is_dst=False))


def to_utc(dt: datetime, zone_id: str) -> datetime:
    """
    Convert a naive local datetime in zone_id to a naive UTC datetime.

    Args:
        dt: Naive wall-clock datetime.
        zone_id: IANA zone the wall-clock time belongs to.

    Returns:
        Naive datetime representing the same instant in UTC.
    """
    _check_naive(dt)
    return localize(dt, zone_id).astimezone(pytz.UTC).replace(tzinfo=None)


def from_utc(dt: datetime, zone_id: str) -> datetime:
    """
    Convert a naive UTC datetime to a naive wall-clock datetime in zone_id.
    """
    _check_naive(dt)
    tz = get_timezone(zone_id)
    return pytz.UTC.localize(dt).astimezone(tz).replace(tzinfo=None)


def convert(dt: datetime, from_zone: str, to_zone: str) -> datetime:
    """Convert a naive wall-clock datetime from one zone to another via UTC."""
    # Validate both ends before doing any arithmetic
    get_timezone(from_zone)
    get_timezone(to_zone)
    return from_utc(to_utc(dt, from_zone), to_zone)


def aware_to_local_naive(dt: datetime, zone_id: str) -> datetime:
    """
    Convert a timezone-aware datetime to naive wall-clock time in zone_id.

    Naive input is assumed to already be wall-clock time and is returned
    unchanged.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(get_timezone(zone_id)).replace(tzinfo=None)
