from __future__ import annotations

from typing import Iterable, List

from timex.models.timetable_entry import DayOfWeek
from timex.schemas.classroom import ClassroomOut
from timex.services.conflict_service import WorkingSet
from timex.services.time_model import TimeSlot


def order_rooms(classrooms: Iterable[ClassroomOut]) -> List[ClassroomOut]:
    # sorted() is stable, so equal capacities keep their listing order.
    return sorted(classrooms, key=lambda room: -room.capacity)


def select_room(
    working_set: WorkingSet,
    *,
    day: DayOfWeek,
    time_slot: TimeSlot | str,
    classrooms: List[ClassroomOut],
    required_capacity: int,
) -> ClassroomOut | None:
    """First room, in the given order, that is large enough and free at (day, slot)."""
    for room in classrooms:
        if room.capacity < required_capacity:
            continue
        if working_set.find_room(room.id, day, time_slot) is None:
            return room
    return None
