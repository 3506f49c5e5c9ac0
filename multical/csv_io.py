"""
CSV export and import of calendar events.

One row per event, columns:
    Subject,Start Date,Start Time,End Date,End Time,All Day Event,
    Description,Location,Private

Dates are YYYY-MM-DD, times HH:MM and booleans True/False. Quoting
follows standard CSV rules (embedded quotes are doubled).
"""

import csv
import io
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Union, TYPE_CHECKING

from .datetime_utils import parse_bool, parse_date, parse_time
from .event import Event, END_OF_DAY, START_OF_DAY
from .exceptions import InvalidArgumentError, InvalidEventError

if TYPE_CHECKING:
    from .event_calendar import Calendar


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] CSV: {msg}", file=sys.stderr)


CSV_HEADER = [
    'Subject', 'Start Date', 'Start Time', 'End Date', 'End Time',
    'All Day Event', 'Description', 'Location', 'Private',
]

DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M'


def _format_bool(value: bool) -> str:
    return 'True' if value else 'False'


def event_to_row(event: Event) -> list[str]:
    return [
        event.subject,
        event.start.strftime(DATE_FORMAT),
        event.start.strftime(TIME_FORMAT),
        event.end.strftime(DATE_FORMAT),
        event.end.strftime(TIME_FORMAT),
        _format_bool(event.all_day),
        event.description,
        event.location,
        _format_bool(not event.is_public),
    ]


def format_events_csv(events: Iterable[Event]) -> str:
    """Render events as CSV text, header included."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(CSV_HEADER)
    for event in events:
        writer.writerow(event_to_row(event))
    return buffer.getvalue()


def export_events_csv(events: Iterable[Event], path: Union[str, Path]) -> Path:
    """
    Write events to a CSV file, creating parent directories as needed.

    Returns:
        Absolute path of the written file.
    """
    if path is None or not str(path).strip():
        raise InvalidArgumentError("File path cannot be null or empty")
    if events is None:
        raise InvalidArgumentError("Events cannot be null")
    path = Path(path).expanduser().absolute()
    path.parent.mkdir(parents=True, exist_ok=True)
    events = list(events)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        f.write(format_events_csv(events))
    _debug_print(f"exported {len(events)} events to {path}")
    return path


def row_to_event(row: list[str]) -> Event:
    if len(row) != len(CSV_HEADER):
        raise InvalidArgumentError(f"Expected {len(CSV_HEADER)} columns, got {len(row)}")
    subject, start_date, start_time, end_date, end_time, all_day, description, location, private = row
    if parse_bool(all_day):
        # Exported all-day events lose their seconds; rebuild whole days
        start = datetime.combine(parse_date(start_date), START_OF_DAY)
        end = datetime.combine(parse_date(end_date), END_OF_DAY)
    else:
        start = datetime.combine(parse_date(start_date), parse_time(start_time))
        end = datetime.combine(parse_date(end_date), parse_time(end_time))
    return Event(subject, start, end, description, location, is_public=not parse_bool(private))


def parse_events_csv(text: str) -> list[Event]:
    """
    Parse CSV text produced by format_events_csv.

    Raises:
        InvalidArgumentError: wrong header, or a row that cannot be read
            (the message names the line).
    """
    if text is None:
        raise InvalidArgumentError("CSV text cannot be null")
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None or [h.strip() for h in header] != CSV_HEADER:
        raise InvalidArgumentError("Invalid CSV format: unexpected header")

    events = []
    for row in reader:
        if not row or all(not cell.strip() for cell in row):
            continue
        try:
            events.append(row_to_event(row))
        except (InvalidArgumentError, InvalidEventError) as e:
            raise InvalidArgumentError(f"Invalid CSV row at line {reader.line_num}: {e}")
    return events


def import_events_csv(path: Union[str, Path]) -> list[Event]:
    path = Path(path)
    with open(path, newline='', encoding='utf-8') as f:
        events = parse_events_csv(f.read())
    _debug_print(f"read {len(events)} events from {path}")
    return events


def import_into_calendar(calendar: 'Calendar', path: Union[str, Path], auto_decline: bool = False) -> int:
    """
    Add every event of a CSV file to a calendar.

    Returns:
        Number of events added; conflicting rows are skipped unless
        auto_decline is on, in which case the first conflict raises.
    """
    added = 0
    for event in import_events_csv(path):
        if calendar.add_event(event, auto_decline):
            added += 1
    _debug_print(f"imported {added} events into '{calendar.name}'")
    return added
