"""Reminder settings value type and validation."""

import logging
from dataclasses import dataclass, field
from collections.abc import Iterable
from typing import Any, Dict, Tuple

import config
from core.window import is_wraparound, parse_time

logger = logging.getLogger(__name__)


class SettingsValidationError(ValueError):
    """Raised when a settings payload breaks a configuration rule."""


def _validate_duration(name: str, value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsValidationError(f"{name} must be a whole number of minutes")
    if value < 0:
        raise SettingsValidationError(f"{name} cannot be negative")
    return value


def _validate_time(name: str, value: Any) -> str:
    try:
        parsed = parse_time(value)
    except ValueError:
        raise SettingsValidationError(f"Invalid {name} format {value!r}, expected HH:MM") from None
    return parsed.strftime(config.TIME_FORMAT)


def _validate_days(value: Any) -> Tuple[int, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise SettingsValidationError("active_days must be a list of weekday numbers")
    days = set()
    for day in value:
        if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 7:
            raise SettingsValidationError(
                f"Invalid weekday {day!r}, expected 1 (Monday) to 7 (Sunday)"
            )
        days.add(day)
    if not days:
        raise SettingsValidationError("Select at least one active day")
    return tuple(sorted(days))


@dataclass(frozen=True)
class ReminderSettings:
    """
    Immutable snapshot of the reminder configuration.

    Validated on construction, so any instance that exists is usable by
    the scheduler. Start later than end is an overnight window.
    Durations of zero are allowed; a zero-length cycle never fires.
    """

    work_duration: int = config.DEFAULT_WORK_MINUTES
    break_duration: int = config.DEFAULT_BREAK_MINUTES
    start_time: str = config.DEFAULT_START_TIME
    end_time: str = config.DEFAULT_END_TIME
    active_days: Tuple[int, ...] = field(default=config.DEFAULT_ACTIVE_DAYS)

    def __post_init__(self):
        """Validate every field and normalise times and days."""
        _validate_duration("work_duration", self.work_duration)
        _validate_duration("break_duration", self.break_duration)
        # Frozen dataclass: normalised values go through object.__setattr__
        object.__setattr__(self, "start_time", _validate_time("start_time", self.start_time))
        object.__setattr__(self, "end_time", _validate_time("end_time", self.end_time))
        object.__setattr__(self, "active_days", _validate_days(self.active_days))

    @property
    def total_cycle_minutes(self) -> int:
        """Length of one work + break cycle."""
        return self.work_duration + self.break_duration

    @property
    def is_overnight(self) -> bool:
        """True when the active window spans midnight."""
        return is_wraparound(parse_time(self.start_time), parse_time(self.end_time))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "work_duration": self.work_duration,
            "break_duration": self.break_duration,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "active_days": list(self.active_days),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReminderSettings':
        """
        Build settings from a full payload.

        Args:
            data: Mapping with all five settings fields.

        Returns:
            Validated ReminderSettings.

        Raises:
            SettingsValidationError: If a field is missing or invalid.
        """
        if not isinstance(data, dict):
            raise SettingsValidationError("Settings must be a JSON object")
        missing = [name for name in _FIELDS if name not in data]
        if missing:
            raise SettingsValidationError(f"Missing settings: {', '.join(missing)}")
        unknown = sorted(set(data) - set(_FIELDS))
        if unknown:
            logger.debug(f"Ignoring unknown settings keys: {unknown}")
        return cls(**{name: data[name] for name in _FIELDS})

    def describe(self) -> str:
        """One-line human summary, e.g. for the tray tooltip."""
        days = ", ".join(config.WEEKDAY_NAMES[d] for d in self.active_days)
        overnight = " (overnight)" if self.is_overnight else ""
        return (
            f"{self.work_duration}m work / {self.break_duration}m break, "
            f"{self.start_time}-{self.end_time}{overnight}, {days}"
        )


_FIELDS = ("work_duration", "break_duration", "start_time", "end_time", "active_days")
