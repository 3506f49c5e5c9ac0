"""Tests for multical/calendar_registry.py"""

import pytest

from multical import Calendar, CalendarRegistry
from multical.exceptions import (
    CalendarNotFoundError,
    DuplicateCalendarError,
    InvalidArgumentError,
)


@pytest.fixture
def registry():
    reg = CalendarRegistry()
    reg.register_calendar("A", Calendar("A", "UTC"))
    reg.register_calendar("B", Calendar("B", "Europe/Berlin"))
    reg.register_calendar("C", Calendar("C", "Asia/Tokyo"))
    return reg


class TestRegistration:
    """Tests for registering calendars."""

    def test_first_calendar_becomes_active(self, registry):
        assert registry.active_calendar_name == "A"
        assert registry.get_active_calendar().timezone == "UTC"

    def test_duplicate_name_rejected(self, registry):
        with pytest.raises(DuplicateCalendarError):
            registry.register_calendar("B", Calendar("B", "UTC"))

    def test_names_are_case_sensitive(self, registry):
        registry.register_calendar("b", Calendar("b", "UTC"))
        assert registry.calendar_names() == ["A", "B", "C", "b"]

    def test_blank_name_rejected(self):
        with pytest.raises(InvalidArgumentError):
            CalendarRegistry().register_calendar(" ", Calendar())

    def test_unknown_calendar(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.get_calendar("Z")

    def test_empty_registry_has_no_active_calendar(self):
        with pytest.raises(CalendarNotFoundError):
            CalendarRegistry().get_active_calendar()


class TestRemoveAndRename:
    """Tests for keeping the active pointer consistent."""

    def test_removing_active_promotes_another(self, registry):
        registry.remove_calendar("A")
        assert registry.active_calendar_name in ("B", "C")
        assert "A" not in registry

    def test_removing_last_clears_pointer(self):
        reg = CalendarRegistry()
        reg.register_calendar("Only", Calendar())
        reg.remove_calendar("Only")
        assert reg.active_calendar_name is None
        assert len(reg) == 0

    def test_remove_unknown(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.remove_calendar("Z")

    def test_rename_moves_active_pointer(self, registry):
        registry.rename_calendar("A", "Alpha")
        assert registry.active_calendar_name == "Alpha"
        assert registry.get_calendar("Alpha").name == "Alpha"
        assert registry.calendar_names() == ["Alpha", "B", "C"]

    def test_rename_to_existing_name(self, registry):
        with pytest.raises(DuplicateCalendarError):
            registry.rename_calendar("A", "B")

    def test_rename_unknown(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.rename_calendar("Z", "Y")

    def test_set_active(self, registry):
        registry.set_active_calendar("C")
        assert registry.get_active_calendar().name == "C"
        with pytest.raises(CalendarNotFoundError):
            registry.set_active_calendar("Z")
