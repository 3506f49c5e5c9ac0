"""
Parsing helpers for the textual date/time values used by edits and import.

Accepted shapes:
    date       YYYY-MM-DD
    time       HH:MM or HH:MM:SS
    datetime   YYYY-MM-DDTHH:MM[:SS] (a space may replace the T)
"""

from datetime import datetime, date, time
from typing import Union

from .exceptions import InvalidArgumentError


def parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except (AttributeError, ValueError):
        raise InvalidArgumentError(f"Invalid date format: {text}. Expected format: YYYY-MM-DD")


def parse_time(text: str) -> time:
    try:
        value = time.fromisoformat(text.strip())
    except (AttributeError, ValueError):
        raise InvalidArgumentError(f"Invalid time format: {text}. Expected format: HH:MM")
    if value.tzinfo is not None:
        raise InvalidArgumentError(f"Time must not carry an offset: {text}")
    return value


def parse_datetime(text: str) -> datetime:
    try:
        value = datetime.fromisoformat(text.strip())
    except (AttributeError, ValueError):
        raise InvalidArgumentError(
            f"Invalid date time format: {text}. Expected format: YYYY-MM-DDThh:mm or YYYY-MM-DDThh:mm:ss"
        )
    if value.tzinfo is not None:
        raise InvalidArgumentError(f"Date time must be local (no offset): {text}")
    return value


def _looks_like_time(text: str) -> bool:
    return ':' in text and '-' not in text


def parse_moment(value: Union[str, datetime, date, time], base_date: date) -> datetime:
    """
    Interpret an edit value as a wall-clock datetime.

    A full datetime is used as given, a bare date means midnight on that
    date and a bare time is placed on base_date.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, time):
        return datetime.combine(base_date, value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError("Date/time value cannot be null or empty")
    text = value.strip()
    if _looks_like_time(text):
        return datetime.combine(base_date, parse_time(text))
    return parse_datetime(text)


def parse_bool(text: str) -> bool:
    lowered = str(text).strip().lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    raise InvalidArgumentError(f"Invalid boolean value: {text}")
