"""
Recurring event series and their expansion into occurrences.

A RecurringEvent describes a weekly series: a first occurrence, the set
of weekdays it repeats on and a termination condition (a count of
occurrences or an inclusive until-date). RecurrenceExpander walks the
calendar forward one day at a time and yields an Event for every
matching weekday. Expansion is lazy and restartable: iterating again
starts over and produces the same occurrences with the same ids.
"""

from datetime import datetime, date, timedelta
from typing import Iterable, Iterator, Optional, Union
import uuid

from .event import Event, RecurrenceInfo, all_day_bounds
from .exceptions import InvalidArgumentError, InvalidEventError


MAX_OCCURRENCES = 999

# Single-letter weekday codes: Thursday is R, Sunday is U
WEEKDAY_CODES = {
    'M': 0,
    'T': 1,
    'W': 2,
    'R': 3,
    'F': 4,
    'S': 5,
    'U': 6,
}
_CODE_FOR_WEEKDAY = {v: k for k, v in WEEKDAY_CODES.items()}


def parse_weekdays(text: Optional[str]) -> frozenset:
    """
    Parse a weekday code string such as "MWF" into weekday numbers.

    Returns:
        frozenset of ints, Monday=0 .. Sunday=6.

    Raises:
        InvalidEventError: empty string or an unknown letter.
    """
    if text is None or not text.strip():
        raise InvalidEventError("Weekdays string cannot be null or empty")
    days = set()
    for ch in text.strip().upper():
        if ch not in WEEKDAY_CODES:
            raise InvalidEventError(f"Invalid weekday character: {ch}")
        days.add(WEEKDAY_CODES[ch])
    return frozenset(days)


def format_weekdays(days: Iterable[int]) -> str:
    """Inverse of parse_weekdays, in Monday..Sunday order."""
    return ''.join(_CODE_FOR_WEEKDAY[d] for d in sorted(set(days)))


def _coerce_weekdays(repeat_days: Union[str, Iterable[int], None]) -> frozenset:
    if isinstance(repeat_days, str):
        return parse_weekdays(repeat_days)
    if repeat_days is None:
        raise InvalidEventError("Repeat days cannot be null or empty.")
    days = frozenset(repeat_days)
    if not days:
        raise InvalidEventError("Repeat days cannot be null or empty.")
    for d in days:
        if not isinstance(d, int) or isinstance(d, bool) or not 0 <= d <= 6:
            raise InvalidEventError(f"Invalid weekday: {d!r}")
    return days


def occurrence_id(recurring_id: str, day: date) -> str:
    """Deterministic id for the occurrence of a series on a given date."""
    return str(uuid.uuid5(uuid.NAMESPACE_OID, f"{recurring_id}-{day.isoformat()}"))


class RecurrenceExpander:
    """
    Generates the concrete occurrences of a weekly recurrence rule.

    Args:
        subject: Subject shared by every occurrence.
        start: Date and time of day of the series start.
        duration: Length of each occurrence; ignored when all_day is set.
        repeat_days: Weekday codes ("MWF") or weekday numbers.
        occurrences: Number of occurrences to produce (1..999), or
        until_date: Last date (inclusive) an occurrence may fall on.
        all_day: Occurrences cover whole days.
        description, location, is_public: Shared property bag.
        recurring_id: Series id; generated when omitted.
    """

    def __init__(
        self,
        subject: str,
        start: datetime,
        duration: Optional[timedelta] = None,
        repeat_days: Union[str, Iterable[int], None] = None,
        occurrences: Optional[int] = None,
        until_date: Optional[date] = None,
        all_day: bool = False,
        description: str = "",
        location: str = "",
        is_public: bool = True,
        recurring_id: Optional[str] = None,
    ):
        if subject is None or not isinstance(subject, str) or not subject.strip():
            raise InvalidEventError("Event subject cannot be null or empty")
        if not isinstance(start, datetime):
            raise InvalidArgumentError("Series start must be a datetime")
        if not all_day:
            if duration is None:
                raise InvalidEventError("Duration is required for timed recurring events")
            if duration < timedelta(0):
                raise InvalidEventError("End date/time must not be before start date/time")

        self.repeat_days = _coerce_weekdays(repeat_days)

        if occurrences is not None and until_date is not None:
            raise InvalidEventError("Cannot specify both occurrences and until date")
        if occurrences is None and until_date is None:
            raise InvalidEventError("Must specify either occurrences or until date")
        if occurrences is not None:
            if isinstance(occurrences, bool) or not isinstance(occurrences, int):
                raise InvalidEventError("Occurrences must be an integer")
            if occurrences <= 0:
                raise InvalidEventError("Occurrences must be positive")
            if occurrences > MAX_OCCURRENCES:
                raise InvalidEventError("Maximum occurrences exceeded")
        if until_date is not None:
            if isinstance(until_date, datetime):
                until_date = until_date.date()
            if until_date < start.date():
                raise InvalidEventError("Until date must not be before start date")

        self.subject = subject
        self.start = start
        self.duration = duration if not all_day else None
        self.occurrences = occurrences
        self.until_date = until_date
        self.all_day = all_day
        self.description = description
        self.location = location
        self.is_public = is_public
        self.recurring_id = recurring_id or str(uuid.uuid4())
        self.info = RecurrenceInfo(
            recurring_id=self.recurring_id,
            repeat_days=self.repeat_days,
            occurrences=occurrences,
            until_date=until_date,
        )

    def _make_occurrence(self, day: date) -> Event:
        if self.all_day:
            start, end = all_day_bounds(day)
        else:
            start = datetime.combine(day, self.start.time())
            end = start + self.duration
        return Event(
            self.subject,
            start,
            end,
            description=self.description,
            location=self.location,
            is_public=self.is_public,
            event_id=occurrence_id(self.recurring_id, day),
            recurrence=self.info,
        )

    def iter_dates(self) -> Iterator[date]:
        """Dates of all occurrences, in order."""
        current = self.start.date()
        count = 0
        while True:
            if self.occurrences is not None and count >= self.occurrences:
                return
            if self.until_date is not None and current > self.until_date:
                return
            if current.weekday() in self.repeat_days:
                count += 1
                yield current
            current += timedelta(days=1)

    def __iter__(self) -> Iterator[Event]:
        for day in self.iter_dates():
            yield self._make_occurrence(day)

    def occurrences_between(self, start_date: date, end_date: date) -> Iterator[Event]:
        """Occurrences whose date lies in [start_date, end_date]."""
        if start_date is None or end_date is None:
            raise InvalidArgumentError("Start and end dates cannot be null")
        if start_date > end_date:
            raise InvalidArgumentError("Start date cannot be after end date")
        for day in self.iter_dates():
            if day > end_date:
                return
            if day >= start_date:
                yield self._make_occurrence(day)


class RecurringEvent:
    """
    A recurring event series: first occurrence plus recurrence rule.

    Construction validates everything up front (fail-fast); an invalid
    subject, time range, weekday set or termination condition raises
    InvalidEventError. Iterating yields the occurrences as Events.
    """

    def __init__(
        self,
        subject: str,
        start: datetime,
        end: Optional[datetime],
        repeat_days: Union[str, Iterable[int]],
        occurrences: Optional[int] = None,
        until_date: Optional[date] = None,
        description: str = "",
        location: str = "",
        is_public: bool = True,
        all_day: bool = False,
        recurring_id: Optional[str] = None,
    ):
        # The template validates subject and start <= end
        self.template = Event(subject, start, end, description, location, is_public, all_day=all_day)
        self.expander = RecurrenceExpander(
            subject=self.template.subject,
            start=self.template.start,
            duration=self.template.duration,
            repeat_days=repeat_days,
            occurrences=occurrences,
            until_date=until_date,
            all_day=all_day or end is None,
            description=self.template.description,
            location=self.template.location,
            is_public=self.template.is_public,
            recurring_id=recurring_id,
        )

    # ==================== Convenience Properties ====================

    @property
    def subject(self) -> str:
        return self.template.subject

    @property
    def start(self) -> datetime:
        return self.template.start

    @property
    def end(self) -> datetime:
        return self.template.end

    @property
    def is_recurring(self) -> bool:
        return True

    @property
    def description(self) -> str:
        return self.template.description

    @property
    def location(self) -> str:
        return self.template.location

    @property
    def is_public(self) -> bool:
        return self.template.is_public

    @property
    def all_day(self) -> bool:
        return self.expander.all_day

    @property
    def recurring_id(self) -> str:
        return self.expander.recurring_id

    @property
    def repeat_days(self) -> frozenset:
        return self.expander.repeat_days

    @property
    def occurrences(self) -> Optional[int]:
        return self.expander.occurrences

    @property
    def until_date(self) -> Optional[date]:
        return self.expander.until_date

    @property
    def info(self) -> RecurrenceInfo:
        return self.expander.info

    def __iter__(self) -> Iterator[Event]:
        return iter(self.expander)

    def all_occurrences(self) -> list[Event]:
        return list(self.expander)

    def occurrences_between(self, start_date: date, end_date: date) -> list[Event]:
        return list(self.expander.occurrences_between(start_date, end_date))

    def __repr__(self):
        mode = (f"occurrences={self.occurrences}" if self.occurrences is not None
                else f"until={self.until_date.isoformat()}")
        return (f"RecurringEvent(subject={self.subject!r}, start={self.start.isoformat()}, "
                f"days={format_weekdays(self.repeat_days)!r}, {mode})")
