"""Shared test fixtures for multical tests.

This module provides common fixtures used across all test modules:
- A fresh calendar in New York time
- A manager with two calendars in different zones
- Standard sample datetimes (2023-01-02 is a Monday)
"""

from datetime import datetime, date

import pytest

from multical import Calendar, CalendarManager, Event


# ─────────────────────────────────────────────────────────────────────────────
# Sample Dates
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def monday() -> date:
    """First Monday of 2023."""
    return date(2023, 1, 2)


@pytest.fixture
def morning() -> tuple[datetime, datetime]:
    """A 10:00-11:00 slot on 2023-01-02."""
    return datetime(2023, 1, 2, 10, 0), datetime(2023, 1, 2, 11, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Calendar Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def calendar() -> Calendar:
    """Empty calendar in America/New_York."""
    return Calendar("Work", "America/New_York")


@pytest.fixture
def meeting(morning) -> Event:
    """10:00-11:00 team meeting."""
    start, end = morning
    return Event("Team Meeting", start, end, description="Weekly sync", location="Room 1")


@pytest.fixture
def busy_calendar(calendar, meeting) -> Calendar:
    """Calendar holding the team meeting."""
    calendar.add_event(meeting)
    return calendar


@pytest.fixture
def manager() -> CalendarManager:
    """Manager with 'Work' (New York, active) and 'Home' (London)."""
    mgr = CalendarManager()
    mgr.create_calendar("Work", "America/New_York")
    mgr.create_calendar("Home", "Europe/London")
    return mgr
