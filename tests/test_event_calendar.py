"""Tests for multical/event_calendar.py

Covers adding events under both conflict policies, recurring series,
lookups and range queries.
"""

from datetime import datetime, date, timedelta

import pytest

from multical import Calendar, Event, RecurringEvent
from multical.exceptions import (
    ConflictingEventError,
    EventNotFoundError,
    InvalidArgumentError,
    InvalidTimezoneError,
)


# ─────────────────────────────────────────────────────────────────────────────
# Construction
# ─────────────────────────────────────────────────────────────────────────────


class TestCalendarSetup:
    """Tests for calendar creation and timezone changes."""

    def test_invalid_timezone(self):
        with pytest.raises(InvalidTimezoneError):
            Calendar("Bad", "Invalid/Zone")

    def test_set_timezone_keeps_wall_clock_times(self, busy_calendar, meeting):
        busy_calendar.set_timezone("Asia/Tokyo")
        assert busy_calendar.timezone == "Asia/Tokyo"
        assert busy_calendar.get_all_events()[0].start == meeting.start

    def test_set_timezone_rejects_unknown_zone(self, calendar):
        with pytest.raises(InvalidTimezoneError):
            calendar.set_timezone("Nope")
        assert calendar.timezone == "America/New_York"


# ─────────────────────────────────────────────────────────────────────────────
# Adding Events
# ─────────────────────────────────────────────────────────────────────────────


class TestAddEvent:
    """Tests for single-event insertion."""

    def test_adds_event(self, calendar, meeting):
        assert calendar.add_event(meeting) is True
        assert meeting in calendar
        assert len(calendar) == 1

    def test_conflict_declined_softly(self, busy_calendar):
        clash = Event("Clash", datetime(2023, 1, 2, 10, 30), datetime(2023, 1, 2, 11, 30))
        assert busy_calendar.add_event(clash, auto_decline=False) is False
        assert len(busy_calendar) == 1

    def test_conflict_raises_with_auto_decline(self, busy_calendar):
        clash = Event("Clash", datetime(2023, 1, 2, 11, 0), datetime(2023, 1, 2, 12, 0))
        with pytest.raises(ConflictingEventError):
            busy_calendar.add_event(clash, auto_decline=True)
        assert len(busy_calendar) == 1

    def test_gap_of_one_minute_is_fine(self, busy_calendar):
        later = Event("Later", datetime(2023, 1, 2, 11, 1), datetime(2023, 1, 2, 12, 0))
        assert busy_calendar.add_event(later, auto_decline=True)

    def test_none_rejected(self, calendar):
        with pytest.raises(InvalidArgumentError):
            calendar.add_event(None)

    def test_same_event_twice_rejected(self, busy_calendar, meeting):
        with pytest.raises(InvalidArgumentError):
            busy_calendar.add_event(meeting)

    def test_all_day_event_blocks_timed_event(self, calendar):
        calendar.add_event(Event.create_all_day("Holiday", date(2023, 1, 2)))
        assert calendar.add_event(Event("Call", datetime(2023, 1, 2, 15, 0),
                                        datetime(2023, 1, 2, 16, 0))) is False


class TestRecurringSeries:
    """Tests for adding and creating recurring events."""

    def test_add_recurring_event(self, calendar):
        series = RecurringEvent("Gym", datetime(2023, 1, 2, 7, 0), datetime(2023, 1, 2, 8, 0),
                                "MWF", occurrences=5)
        assert calendar.add_recurring_event(series) is True
        assert len(calendar) == 5
        assert len(calendar.get_series(series.recurring_id)) == 5
        assert calendar.get_recurring_events() == [series]

    def test_series_is_all_or_nothing(self, busy_calendar):
        series = RecurringEvent("Clashing", datetime(2023, 1, 2, 10, 30),
                                datetime(2023, 1, 2, 10, 45), "M", occurrences=3)
        assert busy_calendar.add_recurring_event(series, auto_decline=False) is False
        assert len(busy_calendar) == 1
        with pytest.raises(ConflictingEventError):
            busy_calendar.add_recurring_event(series, auto_decline=True)
        assert len(busy_calendar) == 1

    def test_add_event_delegates_series(self, calendar):
        series = RecurringEvent("Gym", datetime(2023, 1, 2, 7, 0), datetime(2023, 1, 2, 8, 0),
                                "TR", until_date=date(2023, 1, 12))
        assert calendar.add_event(series)
        assert len(calendar) == 4

    def test_conflicts_checks_every_occurrence(self, calendar):
        calendar.add_event(Event("Dentist", datetime(2023, 1, 11, 7, 30), datetime(2023, 1, 11, 8, 30)))
        series = RecurringEvent("Gym", datetime(2023, 1, 2, 7, 0), datetime(2023, 1, 2, 8, 0),
                                "MWF", occurrences=5)
        assert calendar.conflicts(series)

    def test_create_recurring_event(self, calendar):
        ok = calendar.create_recurring_event(
            "Class", datetime(2023, 1, 3, 14, 0), datetime(2023, 1, 3, 15, 15), "TR", 4)
        assert ok is True
        assert [e.start.date() for e in calendar.get_all_events()] == [
            date(2023, 1, 3), date(2023, 1, 5), date(2023, 1, 10), date(2023, 1, 12),
        ]

    def test_create_recurring_event_until(self, calendar):
        assert calendar.create_recurring_event_until(
            "Class", datetime(2023, 1, 3, 14, 0), datetime(2023, 1, 3, 15, 0), "T", date(2023, 1, 31))
        assert len(calendar) == 5

    def test_create_all_day_recurring_event(self, calendar, monday):
        assert calendar.create_all_day_recurring_event("Focus", monday, "MW", 4)
        events = calendar.get_all_events()
        assert len(events) == 4
        assert all(e.all_day for e in events)

    def test_create_all_day_recurring_event_until(self, calendar, monday):
        assert calendar.create_all_day_recurring_event_until("Focus", monday, "F", date(2023, 1, 20))
        assert [e.start.date() for e in calendar] == [date(2023, 1, 6), date(2023, 1, 13), date(2023, 1, 20)]

    @pytest.mark.parametrize("occurrences", [0, 1000])
    def test_create_rejects_bad_count_softly(self, calendar, monday, occurrences):
        assert calendar.create_all_day_recurring_event("Focus", monday, "M", occurrences) is False
        assert len(calendar) == 0

    def test_create_rejects_blank_name_softly(self, calendar, monday):
        assert calendar.create_all_day_recurring_event("", monday, "M", 3) is False
        assert len(calendar) == 0

    def test_create_rejects_bad_weekdays_softly(self, calendar, monday):
        assert calendar.create_all_day_recurring_event("Focus", monday, "MXZ", 3) is False

    def test_create_conflict_raises_with_auto_decline(self, busy_calendar):
        with pytest.raises(ConflictingEventError):
            busy_calendar.create_recurring_event(
                "Clash", datetime(2023, 1, 2, 10, 0), datetime(2023, 1, 2, 10, 30), "M", 2,
                auto_decline=True)

    def test_create_max_occurrences(self, calendar, monday):
        assert calendar.create_all_day_recurring_event("Daily", monday, "MTWRFSU", 999)
        assert len(calendar) == 999


# ─────────────────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────────────────


class TestQueries:
    """Tests for lookups and range queries."""

    @pytest.mark.parametrize("moment, expected", [
        (datetime(2023, 1, 2, 10, 30), True),
        (datetime(2023, 1, 2, 9, 30), False),
        (datetime(2023, 1, 2, 11, 30), False),
        (datetime(2023, 1, 2, 11, 0), True),
    ])
    def test_is_busy(self, busy_calendar, moment, expected):
        assert busy_calendar.is_busy(moment) is expected

    def test_find_event(self, busy_calendar, meeting):
        assert busy_calendar.find_event("Team Meeting", meeting.start) is meeting

    def test_find_event_missing(self, busy_calendar, meeting):
        with pytest.raises(EventNotFoundError):
            busy_calendar.find_event("Other", meeting.start)

    def test_get_event_by_id(self, busy_calendar, meeting):
        assert busy_calendar.get_event(meeting.id) is meeting
        assert busy_calendar.get_event("missing") is None

    def test_events_on_date_include_multi_day(self, calendar):
        trip = Event("Trip", datetime(2023, 1, 1, 18, 0), datetime(2023, 1, 3, 9, 0))
        lunch = Event("Lunch", datetime(2023, 1, 4, 12, 0), datetime(2023, 1, 4, 13, 0))
        calendar.add_event(trip)
        calendar.add_event(lunch)
        assert calendar.get_events_on_date(date(2023, 1, 2)) == [trip]
        assert calendar.get_events_in_range(date(2023, 1, 3), date(2023, 1, 4)) == [trip, lunch]

    def test_range_with_inverted_dates(self, calendar):
        with pytest.raises(InvalidArgumentError):
            calendar.get_events_in_range(date(2023, 1, 5), date(2023, 1, 1))

    def test_all_events_ordered_by_start(self, calendar):
        for hour in (15, 8, 12):
            start = datetime(2023, 1, 2, hour, 0)
            calendar.add_event(Event(f"E{hour}", start, start + timedelta(minutes=30)))
        assert [e.subject for e in calendar.get_all_events()] == ["E8", "E12", "E15"]


# ─────────────────────────────────────────────────────────────────────────────
# Removal & Replacement
# ─────────────────────────────────────────────────────────────────────────────


class TestRemoveAndUpdate:
    """Tests for removing and replacing events."""

    def test_remove_event(self, busy_calendar, meeting):
        assert busy_calendar.remove_event(meeting.id) is True
        assert busy_calendar.remove_event(meeting.id) is False
        assert not busy_calendar.is_busy(datetime(2023, 1, 2, 10, 30))

    def test_remove_series(self, calendar, monday):
        calendar.create_all_day_recurring_event("Focus", monday, "MW", 4)
        series_id = calendar.get_all_events()[0].recurring_id
        assert calendar.remove_series(series_id) == 4
        assert len(calendar) == 0
        assert calendar.get_recurring_events() == []

    def test_update_event_keeps_id(self, busy_calendar, meeting):
        replacement = Event("Moved", datetime(2023, 1, 2, 14, 0), datetime(2023, 1, 2, 15, 0))
        assert busy_calendar.update_event(meeting.id, replacement)
        stored = busy_calendar.get_event(meeting.id)
        assert stored.subject == "Moved"
        assert busy_calendar.is_busy(datetime(2023, 1, 2, 14, 30))
        assert not busy_calendar.is_busy(datetime(2023, 1, 2, 10, 30))

    def test_update_event_conflict_leaves_original(self, busy_calendar, meeting):
        other = Event("Other", datetime(2023, 1, 2, 13, 0), datetime(2023, 1, 2, 14, 0))
        busy_calendar.add_event(other)
        replacement = Event("Moved", datetime(2023, 1, 2, 13, 30), datetime(2023, 1, 2, 14, 30))
        assert busy_calendar.update_event(meeting.id, replacement, auto_decline=False) is False
        assert busy_calendar.get_event(meeting.id).subject == "Team Meeting"
        with pytest.raises(ConflictingEventError):
            busy_calendar.update_event(meeting.id, replacement)

    def test_update_missing_event(self, calendar, meeting):
        assert calendar.update_event("nope", meeting) is False
