"""
Registry of named calendars with one active calendar.

Names are unique and case-sensitive. Once any calendar exists the active
pointer always names one of them; removing the active calendar hands the
pointer to another calendar or clears it when none remain.
"""

from datetime import datetime
from typing import Iterator, Optional
import sys

from .event_calendar import Calendar
from .exceptions import CalendarNotFoundError, DuplicateCalendarError, InvalidArgumentError


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] REGISTRY: {msg}", file=sys.stderr)


class CalendarRegistry:
    def __init__(self):
        self._calendars: dict[str, Calendar] = {}
        self._active_name: Optional[str] = None

    def __len__(self) -> int:
        return len(self._calendars)

    def __contains__(self, name: str) -> bool:
        return name in self._calendars

    def __iter__(self) -> Iterator[Calendar]:
        return iter(list(self._calendars.values()))

    @property
    def active_calendar_name(self) -> Optional[str]:
        return self._active_name

    def calendar_names(self) -> list[str]:
        return list(self._calendars)

    def has_calendar(self, name: str) -> bool:
        return name in self._calendars

    def get_calendar(self, name: str) -> Calendar:
        try:
            return self._calendars[name]
        except KeyError:
            raise CalendarNotFoundError(f"Calendar not found: {name}")

    def register_calendar(self, name: str, calendar: Calendar) -> None:
        """
        Add a calendar under a name; the first calendar becomes active.

        Raises:
            InvalidArgumentError: blank name or missing calendar.
            DuplicateCalendarError: the name is taken.
        """
        if name is None or not name.strip():
            raise InvalidArgumentError("Calendar name cannot be null or empty")
        if calendar is None:
            raise InvalidArgumentError("Calendar cannot be null")
        if name in self._calendars:
            raise DuplicateCalendarError(f"Calendar with name '{name}' already exists")
        calendar.name = name
        self._calendars[name] = calendar
        if self._active_name is None:
            self._active_name = name
        _debug_print(f"registered '{name}' ({calendar.timezone})")

    def remove_calendar(self, name: str) -> Calendar:
        if name not in self._calendars:
            raise CalendarNotFoundError(f"Calendar not found: {name}")
        calendar = self._calendars.pop(name)
        if name == self._active_name:
            self._active_name = next(iter(self._calendars), None)
            _debug_print(f"active calendar is now {self._active_name!r}")
        _debug_print(f"removed '{name}'")
        return calendar

    def rename_calendar(self, old_name: str, new_name: str) -> None:
        """
        Re-key a calendar; the active pointer follows the rename.

        Raises:
            CalendarNotFoundError: old_name is not registered.
            DuplicateCalendarError: new_name is already used.
        """
        if old_name not in self._calendars:
            raise CalendarNotFoundError(f"Calendar not found: {old_name}")
        if new_name is None or not new_name.strip():
            raise InvalidArgumentError("Calendar name cannot be null or empty")
        if new_name == old_name:
            return
        if new_name in self._calendars:
            raise DuplicateCalendarError(f"Calendar with name '{new_name}' already exists")

        # Rebuild the dict so the renamed calendar keeps its position
        self._calendars = {
            (new_name if key == old_name else key): cal
            for key, cal in self._calendars.items()
        }
        self._calendars[new_name].name = new_name
        if self._active_name == old_name:
            self._active_name = new_name
        _debug_print(f"renamed '{old_name}' to '{new_name}'")

    def set_active_calendar(self, name: str) -> None:
        if name not in self._calendars:
            raise CalendarNotFoundError(f"Calendar not found: {name}")
        self._active_name = name

    def get_active_calendar(self) -> Calendar:
        if self._active_name is None:
            raise CalendarNotFoundError("No active calendar set")
        return self.get_calendar(self._active_name)
