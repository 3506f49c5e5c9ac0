"""
Configuration parser for multical.

Reads a TOML file with a [General] section and one table per calendar.
"""

import tomllib
import os
import sys
from datetime import datetime
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] CONFIG: {msg}", file=sys.stderr)


@dataclass
class GeneralConfig:
    """Settings that apply to every calendar."""
    default_timezone: str = "America/New_York"
    auto_decline: bool = True  # Conflicts raise instead of being skipped
    active_calendar: Optional[str] = None


@dataclass
class CalendarEntry:
    """One calendar to create at startup."""
    name: str
    timezone: Optional[str] = None  # Falls back to General.default_timezone


@dataclass
class Config:
    """Main configuration container for multical."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    calendars: list[CalendarEntry] = field(default_factory=list)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'multical' / 'multical.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from a TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        general_data = data.get('General', {})
        general = GeneralConfig(
            default_timezone=general_data.get('default_timezone', GeneralConfig.default_timezone),
            auto_decline=bool(general_data.get('auto_decline', GeneralConfig.auto_decline)),
            active_calendar=general_data.get('active_calendar'),
        )

        # Supports both [Calendar.Name] and [Calendar] with nested sub-tables
        calendars = []
        for key, value in data.items():
            if key.startswith('Calendar.') and isinstance(value, dict):
                calendars.append(CalendarEntry(
                    name=key.split('.', 1)[1],
                    timezone=value.get('timezone'),
                ))
            elif key == 'Calendar' and isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    if isinstance(sub_value, dict):
                        calendars.append(CalendarEntry(
                            name=sub_key,
                            timezone=sub_value.get('timezone'),
                        ))

        _debug_print(f"{len(calendars)} calendars configured, default zone {general.default_timezone}")
        return cls(general=general, calendars=calendars)
