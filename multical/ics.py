"""
iCalendar (RFC 5545) export and import.

Export writes one VEVENT per stored event: timed events in UTC, all-day
events as DATE values with an exclusive DTEND. Import expands RRULE
series with recurring_ical_events inside a date window and converts
every instance to naive wall-clock time in the receiving calendar's zone.
"""

import sys
import uuid
from collections import Counter
from datetime import datetime, date, timedelta
from typing import Optional, Union, TYPE_CHECKING

import pytz
from icalendar import Calendar as ICalCalendar, Event as ICalEvent
from recurring_ical_events import of as recurring_events_of

from .event import Event, RecurrenceInfo, END_OF_DAY, START_OF_DAY
from .exceptions import InvalidArgumentError
from .timezone_utils import aware_to_local_naive, get_timezone, localize

if TYPE_CHECKING:
    from .event_calendar import Calendar


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] ICS: {msg}", file=sys.stderr)


PRODID = '-//multical//multical//EN'
UNTITLED = "Untitled"


def _new_vcalendar() -> ICalCalendar:
    vcal = ICalCalendar()
    vcal.add('prodid', PRODID)
    vcal.add('version', '2.0')
    return vcal


# ==================== Export ====================

def event_to_vevent(event: Event, zone_id: str) -> ICalEvent:
    vevent = ICalEvent()
    vevent.add('uid', event.id)
    vevent.add('summary', event.subject)
    vevent.add('dtstamp', datetime.now(pytz.UTC))

    if event.all_day:
        vevent.add('dtstart', event.start.date())
        vevent.add('dtend', event.end.date() + timedelta(days=1))
    else:
        vevent.add('dtstart', localize(event.start, zone_id).astimezone(pytz.UTC))
        vevent.add('dtend', localize(event.end, zone_id).astimezone(pytz.UTC))

    if event.description:
        vevent.add('description', event.description)
    if event.location:
        vevent.add('location', event.location)
    vevent.add('class', 'PUBLIC' if event.is_public else 'PRIVATE')
    if event.recurring_id:
        vevent.add('related-to', event.recurring_id)
    return vevent


def calendar_to_ical(calendar: 'Calendar') -> bytes:
    """Serialize every stored event of a calendar to iCalendar bytes."""
    vcal = _new_vcalendar()
    vcal.add('x-wr-calname', calendar.name)
    vcal.add('x-wr-timezone', calendar.timezone)
    count = 0
    for event in calendar.get_all_events():
        vcal.add_component(event_to_vevent(event, calendar.timezone))
        count += 1
    _debug_print(f"exported {count} events from '{calendar.name}'")
    return vcal.to_ical()


# ==================== Import ====================

def parse_icalendar(data: Union[str, bytes]) -> ICalCalendar:
    if data is None:
        raise InvalidArgumentError("iCalendar data cannot be null")
    try:
        return ICalCalendar.from_ical(data)
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid iCalendar data: {e}")


def _wall_clock(value: datetime, zone_id: str) -> datetime:
    # Floating times are already wall-clock time
    return aware_to_local_naive(value, zone_id)


def _component_bounds(component, zone_id: str) -> tuple[datetime, datetime]:
    dtstart = component.get('DTSTART')
    if dtstart is None:
        raise InvalidArgumentError(f"VEVENT without DTSTART: {component.get('UID')}")
    start_val = dtstart.dt
    dtend = component.get('DTEND')
    duration = component.get('DURATION')

    if isinstance(start_val, date) and not isinstance(start_val, datetime):
        # DATE values: DTEND is exclusive
        if dtend is not None:
            last_day = dtend.dt - timedelta(days=1)
        elif duration is not None:
            last_day = start_val + duration.dt - timedelta(days=1)
        else:
            last_day = start_val
        last_day = max(last_day, start_val)
        return datetime.combine(start_val, START_OF_DAY), datetime.combine(last_day, END_OF_DAY)

    start = _wall_clock(start_val, zone_id)
    if dtend is not None:
        end_val = dtend.dt
        if isinstance(end_val, date) and not isinstance(end_val, datetime):
            end_val = datetime.combine(end_val, START_OF_DAY)
        end = _wall_clock(end_val, zone_id)
    elif duration is not None:
        end = start + duration.dt
    else:
        end = start
    return start, max(start, end)


def _series_key(component, uid_counts: Counter) -> Optional[str]:
    related = component.get('RELATED-TO')
    if related:
        return str(related)
    uid = str(component.get('UID', ''))
    if uid and (uid_counts[uid] > 1 or 'RRULE' in component):
        return uid
    return None


def events_from_ical(
    data: Union[str, bytes],
    timezone: str,
    window_start: date,
    window_end: date,
) -> list[Event]:
    """
    Read events from iCalendar data.

    Recurring VEVENTs are expanded for every date in the inclusive
    window [window_start, window_end]. Instances of one series are tagged
    with a shared, freshly generated series id.

    Raises:
        InvalidArgumentError: unreadable data or a bad window.
        InvalidTimezoneError: unknown timezone.
    """
    get_timezone(timezone)
    if window_start is None or window_end is None:
        raise InvalidArgumentError("Import window dates cannot be null")
    if window_start > window_end:
        raise InvalidArgumentError("Start date cannot be after end date")
    vcal = parse_icalendar(data)

    expanded = list(recurring_events_of(vcal).between(window_start, window_end + timedelta(days=1)))
    # Expanded instances of one series repeat the master's UID
    uid_counts = Counter(str(c.get('UID', '')) for c in expanded)

    rows = []
    for component in expanded:
        start, end = _component_bounds(component, timezone)
        summary = str(component.get('SUMMARY', '')).strip() or UNTITLED
        visibility = str(component.get('CLASS', 'PUBLIC')).upper()
        rows.append({
            'subject': summary,
            'start': start,
            'end': end,
            'description': str(component.get('DESCRIPTION', '')),
            'location': str(component.get('LOCATION', '')),
            'is_public': visibility not in ('PRIVATE', 'CONFIDENTIAL'),
            'series': _series_key(component, uid_counts),
        })

    # One RecurrenceInfo per series, built from the instances seen
    series_info: dict[str, RecurrenceInfo] = {}
    for key in {row['series'] for row in rows if row['series']}:
        dates = [row['start'].date() for row in rows if row['series'] == key]
        series_info[key] = RecurrenceInfo(
            recurring_id=str(uuid.uuid4()),
            repeat_days=frozenset(d.weekday() for d in dates),
            until_date=max(dates),
        )

    events = []
    for row in sorted(rows, key=lambda r: r['start']):
        key = row.pop('series')
        info = series_info.get(key) if key else None
        events.append(Event(recurrence=info, **row))
    _debug_print(f"read {len(events)} events between {window_start} and {window_end}")
    return events


def import_ical_into_calendar(
    calendar: 'Calendar',
    data: Union[str, bytes],
    window_start: date,
    window_end: date,
    auto_decline: bool = False,
) -> int:
    """
    Add the events of iCalendar data to a calendar.

    Returns:
        Number of events added; conflicting events are skipped unless
        auto_decline is on.
    """
    added = 0
    for event in events_from_ical(data, calendar.timezone, window_start, window_end):
        if calendar.add_event(event, auto_decline):
            added += 1
    _debug_print(f"imported {added} events into '{calendar.name}'")
    return added
