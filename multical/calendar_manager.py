"""
Calendar manager: creation, naming rules and cross-calendar copies.

The manager wraps one CalendarRegistry instance. Name uniqueness lives
in that registry, so two managers never see each other's calendars.
"""

from datetime import datetime, date, timedelta
from typing import Any, Callable, Optional, TYPE_CHECKING
import sys
import uuid

from .calendar_registry import CalendarRegistry
from .event import Event, RecurrenceInfo
from .event_calendar import Calendar
from .exceptions import CalendarNotFoundError, InvalidArgumentError
from .timezone_utils import convert, get_default_timezone, get_timezone, set_default_timezone

if TYPE_CHECKING:
    from .config import Config


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] MANAGER: {msg}", file=sys.stderr)


def normalize_calendar_name(name: Optional[str]) -> str:
    """
    Strip surrounding quotes and check a calendar name.

    Names are non-empty and use only letters, digits and underscores.
    """
    if name is None:
        raise InvalidArgumentError("Calendar name cannot be null")
    text = name.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        text = text[1:-1]
    if not text:
        raise InvalidArgumentError("Calendar name cannot be empty")
    if any(not (ch.isalnum() or ch == '_') for ch in text):
        raise InvalidArgumentError(f"Invalid calendar name: {name}")
    return text


class CalendarManager:
    """
    Owns the registry of calendars for one application session.

    Args:
        auto_decline: Default conflict policy for copy operations.
    """

    def __init__(self, auto_decline: bool = True):
        self.registry = CalendarRegistry()
        self.auto_decline = auto_decline

    @classmethod
    def from_config(cls, config: 'Config') -> 'CalendarManager':
        """Build a manager with every calendar listed in the configuration."""
        set_default_timezone(config.general.default_timezone)
        manager = cls(auto_decline=config.general.auto_decline)
        for entry in config.calendars:
            manager.create_calendar(entry.name, entry.timezone or config.general.default_timezone)
        if config.general.active_calendar:
            manager.set_active_calendar(config.general.active_calendar)
        _debug_print(f"configured {manager.calendar_count()} calendars")
        return manager

    # ==================== Calendar Lifecycle ====================

    def create_calendar(self, name: str, timezone: str) -> Calendar:
        """
        Raises:
            InvalidTimezoneError: unknown zone.
            InvalidArgumentError: malformed name.
            DuplicateCalendarError: name already used.
        """
        get_timezone(timezone)
        name = normalize_calendar_name(name)
        calendar = Calendar(name, timezone)
        self.registry.register_calendar(name, calendar)
        return calendar

    def create_calendar_with_default_timezone(self, name: str) -> Calendar:
        return self.create_calendar(name, get_default_timezone())

    def remove_calendar(self, name: str) -> None:
        self.registry.remove_calendar(name)

    def edit_calendar_name(self, old_name: str, new_name: str) -> None:
        self.registry.rename_calendar(old_name, normalize_calendar_name(new_name))

    def edit_calendar_timezone(self, name: str, timezone: str) -> None:
        get_timezone(timezone)
        self.registry.get_calendar(name).set_timezone(timezone)

    def edit_calendar(self, name: str, prop: str, value: str) -> None:
        """Edit a calendar's `name` or `timezone` property."""
        key = (prop or '').strip().lower()
        if key == 'name':
            self.edit_calendar_name(name, value)
        elif key == 'timezone':
            self.edit_calendar_timezone(name, value)
        else:
            raise InvalidArgumentError(f"Unsupported calendar property: {prop}")

    # ==================== Lookup ====================

    def get_calendar(self, name: str) -> Calendar:
        return self.registry.get_calendar(name)

    def has_calendar(self, name: str) -> bool:
        return self.registry.has_calendar(name)

    def get_active_calendar(self) -> Calendar:
        return self.registry.get_active_calendar()

    def set_active_calendar(self, name: str) -> None:
        self.registry.set_active_calendar(name)

    def calendar_names(self) -> list[str]:
        return self.registry.calendar_names()

    def calendar_count(self) -> int:
        return len(self.registry)

    def execute_on_calendar(self, name: str, operation: Callable[[Calendar], Any]) -> Any:
        return operation(self.registry.get_calendar(name))

    # ==================== Copying ====================

    def _copy_endpoints(self, calendar_name: Optional[str], target_name: str) -> tuple[Calendar, Calendar]:
        if target_name is None or not self.registry.has_calendar(target_name):
            raise CalendarNotFoundError(f"Target calendar '{target_name}' does not exist")
        if calendar_name is None:
            source = self.registry.get_active_calendar()
        else:
            source = self.registry.get_calendar(calendar_name)
        return source, self.registry.get_calendar(target_name)

    @staticmethod
    def _place(event: Event, new_start: datetime, source: Calendar, target: Calendar,
               recurrence: Optional[RecurrenceInfo] = None) -> Event:
        """Copy of event starting at new_start (source wall-clock), in target's zone."""
        if event.all_day:
            # All-day events stay whole days on the same calendar date
            return Event(event.subject, new_start, None, event.description, event.location,
                         event.is_public, all_day=True, recurrence=recurrence)
        start = convert(new_start, source.timezone, target.timezone)
        return event.copy(start=start, end=start + event.duration, recurrence=recurrence)

    def copy_event(
        self,
        subject: str,
        start: datetime,
        target_calendar: str,
        target_start: Optional[datetime] = None,
        source_calendar: Optional[str] = None,
        auto_decline: Optional[bool] = None,
    ) -> bool:
        """
        Copy one event into another calendar.

        target_start is wall-clock time in the source calendar's zone
        (defaults to the event's own start); it is converted through UTC
        into the target zone and the event's duration is kept.

        Raises:
            CalendarNotFoundError: the target (or source) is not registered.
            EventNotFoundError: no event with this subject and start.
            ConflictingEventError: it conflicts at the destination and
                auto_decline is on.
        """
        source, target = self._copy_endpoints(source_calendar, target_calendar)
        event = source.find_event(subject, start)
        copied = self._place(event, target_start or event.start, source, target)
        decline = self.auto_decline if auto_decline is None else auto_decline
        added = target.add_event(copied, decline)
        if added:
            _debug_print(f"copied '{subject}' from '{source.name}' to '{target.name}' at {copied.start}")
        return added

    def copy_events_on_date(
        self,
        source_date: date,
        target_calendar: str,
        target_date: date,
        source_calendar: Optional[str] = None,
    ) -> int:
        """Copy every event on source_date to target_date; returns how many were copied."""
        return self.copy_events_between(source_date, source_date, target_calendar, target_date,
                                        source_calendar)

    def copy_events_between(
        self,
        start_date: date,
        end_date: date,
        target_calendar: str,
        target_start_date: date,
        source_calendar: Optional[str] = None,
    ) -> int:
        """
        Copy all events touching [start_date, end_date] so that start_date
        lands on target_start_date.

        Conflicting events are skipped. Copied occurrences of one series
        share a fresh series id in the target calendar.

        Returns:
            Number of events copied.
        """
        if None in (start_date, end_date, target_start_date):
            raise InvalidArgumentError("Dates cannot be null")
        source, target = self._copy_endpoints(source_calendar, target_calendar)
        offset = timedelta(days=(target_start_date - start_date).days)

        new_series: dict[str, RecurrenceInfo] = {}
        copied = 0
        for event in source.get_events_in_range(start_date, end_date):
            recurrence = None
            if event.recurrence is not None:
                old = event.recurrence
                if old.recurring_id not in new_series:
                    new_series[old.recurring_id] = RecurrenceInfo(
                        recurring_id=str(uuid.uuid4()),
                        repeat_days=frozenset((d + offset.days) % 7 for d in old.repeat_days),
                        occurrences=old.occurrences,
                        until_date=old.until_date + offset if old.until_date else None,
                    )
                recurrence = new_series[old.recurring_id]
            clone = self._place(event, event.start + offset, source, target, recurrence)
            if target.add_event(clone, False):
                copied += 1
        _debug_print(f"copied {copied} events from '{source.name}' to '{target.name}'")
        return copied
