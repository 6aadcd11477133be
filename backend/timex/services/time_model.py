from __future__ import annotations

import re
from dataclasses import dataclass

from timex.core.config import DEFAULT_TIME_SLOT_STRINGS
from timex.core.exceptions import ConfigurationError
from timex.models.timetable_entry import DayOfWeek

DAYS: tuple[DayOfWeek, ...] = tuple(DayOfWeek)

SLOT_PATTERN = re.compile(r"^\d{2}:\d{2}-\d{2}:\d{2}$")


def parse_time_to_minutes(value: str) -> int:
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str

    @classmethod
    def parse(cls, value: str) -> "TimeSlot":
        start, separator, end = value.strip().partition("-")
        if not separator or not start or not end:
            raise ValueError(f"Invalid time slot format: {value}")
        # Validates both boundaries eagerly.
        parse_time_to_minutes(start)
        parse_time_to_minutes(end)
        return cls(start=start.strip(), end=end.strip())

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def _as_slot(value: TimeSlot | str) -> TimeSlot:
    return value if isinstance(value, TimeSlot) else TimeSlot.parse(value)


def overlaps(slot_a: TimeSlot | str, slot_b: TimeSlot | str) -> bool:
    """Half-open overlap: slots that only touch at a boundary do not overlap."""
    a = _as_slot(slot_a)
    b = _as_slot(slot_b)
    return a.start_minutes < b.end_minutes and b.start_minutes < a.end_minutes


def build_catalog(slot_strings: list[str]) -> list[TimeSlot]:
    return [TimeSlot.parse(item) for item in slot_strings]


def load_configured_catalog(slot_strings: list[str]) -> list[TimeSlot]:
    """Parse the configured default slots, failing startup on a bad entry."""
    if not slot_strings:
        raise ConfigurationError("DEFAULT_TIME_SLOTS must list at least one time slot")
    invalid = [item for item in slot_strings if not SLOT_PATTERN.match(item)]
    if invalid:
        raise ConfigurationError(f"Invalid DEFAULT_TIME_SLOTS entries: {', '.join(invalid)}")
    return build_catalog(slot_strings)


DEFAULT_TIME_SLOTS: tuple[TimeSlot, ...] = tuple(build_catalog(DEFAULT_TIME_SLOT_STRINGS))
