from __future__ import annotations

import logging

from timex.models.timetable_entry import DayOfWeek
from timex.services.time_model import TimeSlot, overlaps

logger = logging.getLogger(__name__)


def _day_key(day: DayOfWeek | str) -> str:
    value = day.value if isinstance(day, DayOfWeek) else str(day)
    return value.strip().lower()


def ranges_for_day(availability: dict[str, list[str]] | None, day: DayOfWeek | str) -> list[str]:
    if not availability:
        return []
    key = _day_key(day)
    for raw_day, ranges in availability.items():
        if str(raw_day).strip().lower() == key:
            return list(ranges or [])
    return []


def has_availability_on(availability: dict[str, list[str]] | None, day: DayOfWeek | str) -> bool:
    return bool(ranges_for_day(availability, day))


def is_faculty_available(
    availability: dict[str, list[str]] | None,
    day: DayOfWeek | str,
    time_slot: TimeSlot | str,
) -> bool:
    # Any overlap with a declared range counts, even a single minute.
    for window in ranges_for_day(availability, day):
        try:
            if overlaps(window, time_slot):
                return True
        except ValueError:
            logger.warning("Skipping malformed availability range %r on %s", window, _day_key(day))
    return False
