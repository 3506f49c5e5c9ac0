"""
multical core module

This module provides the core functionality for calendar operations:
- Timezone conversion between IANA zones (timezone_utils.py)
- Event model and recurring series (event.py, recurrence.py)
- Interval-tree backed conflict index (interval_tree.py, conflicts.py)
- Calendar with add/find/edit/query operations (event_calendar.py)
- Named calendars with an active pointer and copying (calendar_registry.py, calendar_manager.py)
- Configuration parsing (config.py)
- CSV and iCalendar import/export (csv_io.py, ics.py)
"""

from .exceptions import (
    CalendarError,
    InvalidArgumentError,
    InvalidEventError,
    ConflictingEventError,
    EventNotFoundError,
    CalendarNotFoundError,
    DuplicateCalendarError,
    InvalidTimezoneError,
)
from .event import Event, RecurrenceInfo
from .recurrence import RecurringEvent, RecurrenceExpander, parse_weekdays, format_weekdays
from .conflicts import ConflictIndex, events_conflict
from .event_calendar import Calendar
from .calendar_registry import CalendarRegistry
from .calendar_manager import CalendarManager
from .config import Config

__all__ = [
    'CalendarError',
    'InvalidArgumentError',
    'InvalidEventError',
    'ConflictingEventError',
    'EventNotFoundError',
    'CalendarNotFoundError',
    'DuplicateCalendarError',
    'InvalidTimezoneError',
    'Event',
    'RecurrenceInfo',
    'RecurringEvent',
    'RecurrenceExpander',
    'parse_weekdays',
    'format_weekdays',
    'ConflictIndex',
    'events_conflict',
    'Calendar',
    'CalendarRegistry',
    'CalendarManager',
    'Config',
]
