"""
Error kinds raised by the calendar core.

Every error derives from CalendarError so callers (command layer, GUI)
can catch the whole family in one place and render "Error: ..." text.
"""


class CalendarError(Exception):
    """Base class for all calendar errors."""


class InvalidArgumentError(CalendarError, ValueError):
    """Missing or malformed input."""


class InvalidEventError(CalendarError, ValueError):
    """Semantically invalid event or recurrence rule."""


class ConflictingEventError(CalendarError):
    """Event overlaps an existing event and auto-decline is on."""


class EventNotFoundError(CalendarError, LookupError):
    pass


class CalendarNotFoundError(CalendarError, LookupError):
    pass


class DuplicateCalendarError(CalendarError):
    pass


class InvalidTimezoneError(CalendarError, ValueError):
    """Zone id is blank or not a known IANA identifier."""
