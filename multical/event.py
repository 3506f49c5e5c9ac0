"""
Event value objects.

An Event is one concrete, dated entry in a calendar. Its start and end
are naive wall-clock datetimes; the owning Calendar supplies the zone.

Recurring series are not a subclass: an occurrence is a plain Event
carrying a RecurrenceInfo tag that names its series (recurring_id) and
the rule that produced it. Series-wide edits are bulk operations over
all Events sharing that tag.
"""

from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from typing import Optional
import uuid

from .exceptions import InvalidArgumentError, InvalidEventError


START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59)


def all_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Start and end datetimes of an all-day event on the given date."""
    return datetime.combine(day, START_OF_DAY), datetime.combine(day, END_OF_DAY)


@dataclass(frozen=True)
class RecurrenceInfo:
    """
    Series metadata attached to every occurrence of a recurring event.

    Exactly one of occurrences / until_date is set.
    """
    recurring_id: str
    repeat_days: frozenset  # weekday numbers, Monday=0 .. Sunday=6
    occurrences: Optional[int] = None
    until_date: Optional[date] = None

    @property
    def termination_mode(self) -> str:
        return "count" if self.occurrences is not None else "until"


def _check_subject(subject) -> str:
    if subject is None or not isinstance(subject, str) or not subject.strip():
        raise InvalidEventError("Event subject cannot be null or empty")
    return subject


def _check_datetime(value, label: str) -> datetime:
    if value is None:
        raise InvalidEventError(f"{label} date/time cannot be null")
    if not isinstance(value, datetime):
        raise InvalidArgumentError(f"{label} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is not None:
        raise InvalidArgumentError(f"{label} must be a naive local datetime")
    return value


class Event:
    """
    A single calendar event.

    Identity is the opaque `id`; two Event objects are equal only when
    their ids match. Subject and times are validated on every change so
    an Event can never hold start > end or an empty subject.
    """

    def __init__(
        self,
        subject: str,
        start: datetime,
        end: Optional[datetime] = None,
        description: Optional[str] = "",
        location: Optional[str] = "",
        is_public: bool = True,
        all_day: bool = False,
        event_id: Optional[str] = None,
        recurrence: Optional[RecurrenceInfo] = None,
    ):
        self._subject = _check_subject(subject)
        start = _check_datetime(start, "Start")

        if all_day or end is None:
            # All-day events cover the whole start date
            start, end = all_day_bounds(start.date())
        else:
            end = _check_datetime(end, "End")
            if start > end:
                raise InvalidEventError("End date/time must not be before start date/time")

        self._start = start
        self._end = end
        self.id: str = event_id or str(uuid.uuid4())
        self.description: str = description if description is not None else ""
        self.location: str = location if location is not None else ""
        self.is_public: bool = bool(is_public)
        self.recurrence: Optional[RecurrenceInfo] = recurrence

    @classmethod
    def create_all_day(
        cls,
        subject: str,
        day: date,
        description: str = "",
        location: str = "",
        is_public: bool = True,
    ) -> 'Event':
        """Create an event spanning the whole of `day` (00:00:00 to 23:59:59)."""
        if not isinstance(day, date):
            raise InvalidArgumentError("All-day event date must be a date")
        if isinstance(day, datetime):
            day = day.date()
        start, end = all_day_bounds(day)
        return cls(subject, start, end, description, location, is_public)

    # ==================== Properties ====================

    @property
    def subject(self) -> str:
        return self._subject

    @subject.setter
    def subject(self, value: str):
        self._subject = _check_subject(value)

    @property
    def start(self) -> datetime:
        return self._start

    @start.setter
    def start(self, value: datetime):
        value = _check_datetime(value, "Start")
        if value > self._end:
            raise InvalidEventError("Start date/time cannot be after end date/time")
        self._start = value

    @property
    def end(self) -> datetime:
        return self._end

    @end.setter
    def end(self, value: datetime):
        value = _check_datetime(value, "End")
        if value < self._start:
            raise InvalidEventError("End date/time cannot be before start date/time")
        self._end = value

    def reschedule(self, start: datetime, end: datetime) -> None:
        """Set both bounds at once (needed when moving an event past its old end)."""
        start = _check_datetime(start, "Start")
        end = _check_datetime(end, "End")
        if start > end:
            raise InvalidEventError("Start date/time cannot be after end date/time")
        self._start, self._end = start, end

    @property
    def all_day(self) -> bool:
        """True when the event covers exactly one whole day."""
        return (self._start.time() == START_OF_DAY
                and self._end == datetime.combine(self._start.date(), END_OF_DAY))

    @property
    def duration(self) -> timedelta:
        return self._end - self._start

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def recurring_id(self) -> Optional[str]:
        return self.recurrence.recurring_id if self.recurrence else None

    # ==================== Queries ====================

    def conflicts_with(self, other: Optional['Event']) -> bool:
        """Closed-interval overlap: shared endpoints count as a conflict."""
        if other is None:
            return False
        return self._start <= other._end and self._end >= other._start

    def spans_multiple_days(self) -> bool:
        return self._start.date() != self._end.date()

    def occurs_on(self, day: date) -> bool:
        return self._start.date() <= day <= self._end.date()

    def contains(self, moment: datetime) -> bool:
        return self._start <= moment <= self._end

    # ==================== Copying ====================

    def copy(self, **changes) -> 'Event':
        """
        Create a new, independent Event (fresh id) from this one.

        Keyword arguments override fields: subject, start, end,
        description, location, is_public, recurrence.
        """
        fields = {
            'subject': self._subject,
            'start': self._start,
            'end': self._end,
            'description': self.description,
            'location': self.location,
            'is_public': self.is_public,
            'recurrence': None,
        }
        fields.update(changes)
        return Event(**fields)

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Event):
            return self.id == other.id
        return False

    def __repr__(self):
        return (f"Event(subject={self._subject!r}, start={self._start.isoformat()}, "
                f"end={self._end.isoformat()}, all_day={self.all_day})")
