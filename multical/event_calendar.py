"""
A named calendar in one timezone.

Calendar owns its events exclusively. Every stored time is a naive
wall-clock datetime interpreted in the calendar's timezone. Additions go
through the conflict index; the caller chooses whether a conflict is an
error (auto_decline=True) or a quiet refusal (auto_decline=False).

Expanded recurring occurrences are stored as ordinary Events tagged with
their series' recurring_id, so queries never need to re-expand a rule.
"""

from datetime import datetime, date, time
from typing import Any, Callable, Optional, Union
import sys

from .conflicts import ConflictIndex
from .datetime_utils import parse_moment
from .event import Event, all_day_bounds
from .exceptions import (
    ConflictingEventError, EventNotFoundError, InvalidArgumentError, InvalidEventError,
)
from .recurrence import RecurringEvent, parse_weekdays
from .timezone_utils import get_timezone


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] CAL: {msg}", file=sys.stderr)


# Edit property names (lower-case) -> canonical field
PROPERTY_ALIASES = {
    'subject': 'subject',
    'title': 'subject',
    'name': 'subject',
    'description': 'description',
    'location': 'location',
    'start': 'start',
    'starttime': 'start',
    'startdatetime': 'start',
    'end': 'end',
    'endtime': 'end',
    'enddatetime': 'end',
    'public': 'public',
    'ispublic': 'public',
    'visibility': 'public',
    'privacy': 'public',
    'private': 'private',
}

_PUBLIC_WORDS = {'true': True, 'public': True, 'false': False, 'private': False}
_PRIVATE_WORDS = {'true': True, 'private': True, 'false': False, 'public': False}


class Calendar:
    """
    Event collection for a single timezone.

    Args:
        name: Calendar name (uniqueness is enforced by the registry).
        timezone: IANA zone id, e.g. "America/New_York".
    """

    def __init__(self, name: str = "Default", timezone: str = "America/New_York"):
        get_timezone(timezone)
        self.name = name
        self._timezone = timezone.strip()
        self._events: dict[str, Event] = {}
        self._index = ConflictIndex()
        # Series added through add_recurring_event, by recurring_id
        self._series: dict[str, RecurringEvent] = {}

    # ==================== Timezone ====================

    @property
    def timezone(self) -> str:
        return self._timezone

    def set_timezone(self, zone_id: str) -> None:
        """
        Change the calendar's zone.

        Stored wall-clock times are kept as they are and are read in the
        new zone from now on.
        """
        get_timezone(zone_id)
        old = self._timezone
        self._timezone = zone_id.strip()
        if old != self._timezone:
            _debug_print(f"{self.name}: timezone changed from {old} to {self._timezone}")

    # ==================== Storage ====================

    def _insert(self, event: Event) -> None:
        self._events[event.id] = event
        self._index.add(event)

    def _discard(self, event: Event) -> None:
        self._events.pop(event.id, None)
        self._index.remove(event)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event: Event) -> bool:
        return isinstance(event, Event) and event.id in self._events

    def __iter__(self):
        return iter(self._index)

    # ==================== Conflicts ====================

    def conflicts(self, candidate: Union[Event, RecurringEvent]) -> bool:
        """
        True if the candidate overlaps any stored event.

        A RecurringEvent conflicts when any one of its occurrences does.
        """
        if candidate is None:
            raise InvalidArgumentError("Event cannot be null")
        if isinstance(candidate, RecurringEvent):
            return self._index.conflicts_any(candidate)
        return self._index.conflicts(candidate)

    def _decline(self, subject: str, clash: Event, auto_decline: bool, what: str = "Event") -> bool:
        _debug_print(f"{self.name}: {what} '{subject}' conflicts with '{clash.subject}' at {clash.start}")
        if auto_decline:
            raise ConflictingEventError(
                f"{what} '{subject}' conflicts with existing event '{clash.subject}'"
            )
        return False

    # ==================== Adding Events ====================

    def add_event(self, event: Event, auto_decline: bool = False) -> bool:
        """
        Add a single event.

        Returns:
            True if stored, False if it conflicts and auto_decline is off.

        Raises:
            InvalidArgumentError: event is missing, malformed or already stored.
            ConflictingEventError: it conflicts and auto_decline is on.
        """
        if isinstance(event, RecurringEvent):
            return self.add_recurring_event(event, auto_decline)
        if event is None:
            raise InvalidArgumentError("Event cannot be null")
        if not isinstance(event, Event):
            raise InvalidArgumentError(f"Expected an Event, got {type(event).__name__}")
        if event.start > event.end:
            raise InvalidArgumentError("Event start must not be after its end")
        if event.id in self._events:
            raise InvalidArgumentError(f"Event is already in calendar '{self.name}'")

        clash = self._index.first_conflict(event)
        if clash is not None:
            return self._decline(event.subject, clash, auto_decline)

        self._insert(event)
        _debug_print(f"{self.name}: added '{event.subject}' {event.start} - {event.end}")
        return True

    def add_recurring_event(self, recurring_event: RecurringEvent, auto_decline: bool = False) -> bool:
        """
        Expand a series and add all of its occurrences, or none of them.
        """
        if recurring_event is None:
            raise InvalidArgumentError("Recurring event cannot be null")
        if not isinstance(recurring_event, RecurringEvent):
            raise InvalidArgumentError(
                f"Expected a RecurringEvent, got {type(recurring_event).__name__}")

        occurrences = recurring_event.all_occurrences()
        for occurrence in occurrences:
            if occurrence.id in self._events:
                raise InvalidArgumentError(
                    f"Series '{recurring_event.subject}' is already in calendar '{self.name}'")
            clash = self._index.first_conflict(occurrence)
            if clash is not None:
                return self._decline(recurring_event.subject, clash, auto_decline, "Recurring event")

        for occurrence in occurrences:
            self._insert(occurrence)
        self._series[recurring_event.recurring_id] = recurring_event
        _debug_print(f"{self.name}: added series '{recurring_event.subject}' "
                     f"({len(occurrences)} occurrences)")
        return True

    def _create_series(self, auto_decline: bool, **kwargs) -> bool:
        # Malformed input is a soft failure here; conflicts still follow auto_decline
        try:
            series = RecurringEvent(**kwargs)
        except (InvalidEventError, InvalidArgumentError) as e:
            _debug_print(f"{self.name}: rejected series '{kwargs.get('subject')}': {e}")
            return False
        return self.add_recurring_event(series, auto_decline)

    def create_recurring_event(
        self,
        name: str,
        start: datetime,
        end: datetime,
        weekdays: str,
        occurrences: int,
        auto_decline: bool = False,
        description: str = "",
        location: str = "",
        is_public: bool = True,
    ) -> bool:
        """Timed series ending after a number of occurrences; False on bad input."""
        try:
            repeat_days = parse_weekdays(weekdays)
        except InvalidEventError:
            return False
        return self._create_series(
            auto_decline, subject=name, start=start, end=end, repeat_days=repeat_days,
            occurrences=occurrences, description=description, location=location,
            is_public=is_public,
        )

    def create_recurring_event_until(
        self,
        name: str,
        start: datetime,
        end: datetime,
        weekdays: str,
        until_date: date,
        auto_decline: bool = False,
        description: str = "",
        location: str = "",
        is_public: bool = True,
    ) -> bool:
        """Timed series ending on an inclusive date; False on bad input."""
        try:
            repeat_days = parse_weekdays(weekdays)
        except InvalidEventError:
            return False
        return self._create_series(
            auto_decline, subject=name, start=start, end=end, repeat_days=repeat_days,
            until_date=until_date, description=description, location=location,
            is_public=is_public,
        )

    def create_all_day_recurring_event(
        self,
        name: str,
        day: date,
        weekdays: str,
        occurrences: int,
        auto_decline: bool = False,
        description: str = "",
        location: str = "",
        is_public: bool = True,
    ) -> bool:
        """All-day series ending after a number of occurrences; False on bad input."""
        if not isinstance(day, date):
            return False
        try:
            repeat_days = parse_weekdays(weekdays)
        except InvalidEventError:
            return False
        start, end = all_day_bounds(day)
        return self._create_series(
            auto_decline, subject=name, start=start, end=end, repeat_days=repeat_days,
            occurrences=occurrences, description=description, location=location,
            is_public=is_public, all_day=True,
        )

    def create_all_day_recurring_event_until(
        self,
        name: str,
        day: date,
        weekdays: str,
        until_date: date,
        auto_decline: bool = False,
        description: str = "",
        location: str = "",
        is_public: bool = True,
    ) -> bool:
        """All-day series ending on an inclusive date; False on bad input."""
        if not isinstance(day, date):
            return False
        try:
            repeat_days = parse_weekdays(weekdays)
        except InvalidEventError:
            return False
        start, end = all_day_bounds(day)
        return self._create_series(
            auto_decline, subject=name, start=start, end=end, repeat_days=repeat_days,
            until_date=until_date, description=description, location=location,
            is_public=is_public, all_day=True,
        )

    # ==================== Lookup & Queries ====================

    def find_event(self, subject: str, start: datetime) -> Event:
        """
        Find the event with exactly this subject and start.

        Raises:
            InvalidArgumentError: subject or start is None.
            EventNotFoundError: no such event.
        """
        if subject is None or start is None:
            raise InvalidArgumentError("Subject and start date/time cannot be null")
        for event in self._index.covering(start):
            if event.start == start and event.subject == subject:
                return event
        raise EventNotFoundError(f"Event not found: {subject} at {start}")

    def get_event(self, event_id: str) -> Optional[Event]:
        return self._events.get(event_id)

    def get_all_events(self) -> list[Event]:
        """All stored events ordered by start."""
        return list(self._index)

    def get_events_on_date(self, day: date) -> list[Event]:
        """Events touching the given date, including multi-day events."""
        if day is None:
            raise InvalidArgumentError("Date cannot be null")
        return self.get_events_in_range(day, day)

    def get_events_in_range(self, start_date: date, end_date: date) -> list[Event]:
        """Events whose [start, end] touches any day in [start_date, end_date]."""
        if start_date is None or end_date is None:
            raise InvalidArgumentError("Dates cannot be null")
        if start_date > end_date:
            raise InvalidArgumentError("Start date cannot be after end date")
        return self._index.intersecting(
            datetime.combine(start_date, time.min),
            datetime.combine(end_date, time.max),
        )

    def is_busy(self, moment: datetime) -> bool:
        """True if some event's closed interval contains the moment."""
        if moment is None:
            raise InvalidArgumentError("DateTime cannot be null")
        return bool(self._index.covering(moment))

    def get_series(self, recurring_id: str) -> list[Event]:
        """Stored occurrences of one series, ordered by start."""
        return [e for e in self._index if e.recurring_id == recurring_id]

    def get_recurring_events(self) -> list[RecurringEvent]:
        return list(self._series.values())

    # ==================== Removal & Replacement ====================

    def remove_event(self, event_id: str) -> bool:
        event = self._events.get(event_id)
        if event is None:
            return False
        self._discard(event)
        _debug_print(f"{self.name}: removed '{event.subject}' at {event.start}")
        return True

    def remove_series(self, recurring_id: str) -> int:
        """Remove every stored occurrence of a series; returns how many."""
        occurrences = self.get_series(recurring_id)
        for event in occurrences:
            self._discard(event)
        self._series.pop(recurring_id, None)
        if occurrences:
            _debug_print(f"{self.name}: removed series {recurring_id} ({len(occurrences)} occurrences)")
        return len(occurrences)

    def update_event(self, event_id: str, updated: Event, auto_decline: bool = True) -> bool:
        """
        Replace an event's fields with those of `updated`, keeping its id.

        Returns False when no event has this id, or when the new times
        conflict and auto_decline is off; the original is left untouched.
        """
        if event_id is None or updated is None:
            raise InvalidArgumentError("Event id and updated event cannot be null")
        existing = self._events.get(event_id)
        if existing is None:
            return False

        clash = self._index.first_conflict(updated, ignore=existing)
        if clash is not None:
            return self._decline(updated.subject, clash, auto_decline, "Updated event")

        existing.subject = updated.subject
        existing.description = updated.description
        existing.location = updated.location
        existing.is_public = updated.is_public
        if (existing.start, existing.end) != (updated.start, updated.end):
            existing.reschedule(updated.start, updated.end)
            self._index.reindex(existing)
        _debug_print(f"{self.name}: updated event {event_id}")
        return True

    # ==================== Editing ====================

    @staticmethod
    def _resolve_property(prop: str) -> str:
        if prop is None or not str(prop).strip():
            raise InvalidEventError("Property name cannot be empty")
        field = PROPERTY_ALIASES.get(str(prop).strip().lower())
        if field is None:
            raise InvalidEventError(f"Unsupported property: {prop}")
        return field

    @staticmethod
    def _plan_edit(event: Event, field: str, value: Any) -> Callable[[Event], bool]:
        """
        Validate an edit against one event without touching it.

        Returns a function that applies the edit and reports whether the
        event's time bounds changed.
        """
        if field == 'subject':
            if value is None or not str(value).strip():
                raise InvalidEventError("Event subject cannot be null or empty")
            new_subject = str(value)

            def apply(e):
                e.subject = new_subject
                return False
            return apply

        if field in ('description', 'location'):
            text = "" if value is None else str(value)

            def apply(e):
                setattr(e, field, text)
                return False
            return apply

        if field in ('public', 'private'):
            words = _PUBLIC_WORDS if field == 'public' else _PRIVATE_WORDS
            key = str(value).strip().lower() if value is not None else ''
            if key not in words:
                raise InvalidEventError(f"Invalid {field} value: {value}")
            is_public = words[key] if field == 'public' else not words[key]

            def apply(e):
                e.is_public = is_public
                return False
            return apply

        # start / end
        base = event.start.date() if field == 'start' else event.end.date()
        try:
            moment = parse_moment(value, base)
        except InvalidArgumentError as e:
            raise InvalidEventError(str(e))
        new_start = moment if field == 'start' else event.start
        new_end = moment if field == 'end' else event.end
        if new_start > new_end:
            raise InvalidEventError(
                f"Edit would put start ({new_start}) after end ({new_end}) for '{event.subject}'")

        def apply(e):
            e.reschedule(new_start, new_end)
            return True
        return apply

    def _apply_edits(self, events: list[Event], prop: str, value: Any) -> int:
        field = self._resolve_property(prop)
        # Validate against every target before changing any of them
        plans = [(event, self._plan_edit(event, field, value)) for event in events]
        for event, apply in plans:
            if apply(event):
                self._index.reindex(event)
        return len(plans)

    def edit_single_event(self, subject: str, start: datetime, prop: str, value: Any) -> bool:
        """
        Edit one property of the event identified by subject and start.

        Returns:
            True once edited, False if there is no such event.

        Raises:
            InvalidEventError: unknown property, empty subject, start after end
                or an unparseable value.
        """
        try:
            event = self.find_event(subject, start)
        except EventNotFoundError:
            return False
        self._apply_edits([event], prop, value)
        _debug_print(f"{self.name}: edited {prop} of '{subject}' at {start}")
        return True

    def edit_events_from_date(self, subject: str, from_datetime: datetime, prop: str, value: Any) -> int:
        """Edit every event with this subject starting at or after from_datetime."""
        if subject is None or from_datetime is None:
            raise InvalidArgumentError("Subject and start date/time cannot be null")
        targets = [e for e in self._index if e.subject == subject and e.start >= from_datetime]
        if not targets:
            return 0
        count = self._apply_edits(targets, prop, value)
        _debug_print(f"{self.name}: edited {prop} of {count} '{subject}' events from {from_datetime}")
        return count

    def edit_all_events(self, subject: str, prop: str, value: Any) -> int:
        """Edit every event with this subject regardless of date."""
        if subject is None:
            raise InvalidArgumentError("Subject cannot be null")
        targets = [e for e in self._index if e.subject == subject]
        if not targets:
            return 0
        count = self._apply_edits(targets, prop, value)
        _debug_print(f"{self.name}: edited {prop} of all {count} '{subject}' events")
        return count

    def __repr__(self):
        return f"Calendar(name={self.name!r}, timezone={self._timezone!r}, events={len(self)})"

    def __str__(self):
        return self.name
