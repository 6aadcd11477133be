from __future__ import annotations

from collections import defaultdict
import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

from timex.models.timetable_entry import DayOfWeek
from timex.schemas.batch import BatchOut
from timex.schemas.classroom import ClassroomOut
from timex.schemas.conflict import Conflict
from timex.schemas.faculty import FacultyOut
from timex.schemas.timetable import TimetableEntryOut
from timex.services.time_model import TimeSlot

if TYPE_CHECKING:
    from timex.services.data_store import TimetableDataStore

logger = logging.getLogger(__name__)

SlotKey = Tuple[str, DayOfWeek, str]


def _slot_key(owner_id: str, day: DayOfWeek, time_slot: TimeSlot | str) -> SlotKey:
    return owner_id, DayOfWeek(day), str(time_slot)


class WorkingSet:
    """Entries placed so far in one generation run, seeded with persisted ones.

    Owned by a single run; every placement is visible to later conflict checks.
    """

    def __init__(self, entries: Iterable[TimetableEntryOut] = ()) -> None:
        self._entries: List[TimetableEntryOut] = []
        self._by_batch: Dict[SlotKey, TimetableEntryOut] = {}
        self._by_faculty: Dict[SlotKey, TimetableEntryOut] = {}
        self._by_room: Dict[SlotKey, TimetableEntryOut] = {}
        self._sessions: Dict[Tuple[str, str], int] = defaultdict(int)
        for entry in entries:
            self.add(entry)

    def add(self, entry: TimetableEntryOut) -> None:
        self._entries.append(entry)
        # First entry wins the index so lookups report the earliest holder.
        self._by_batch.setdefault(_slot_key(entry.batch_id, entry.day, entry.time_slot), entry)
        self._by_faculty.setdefault(_slot_key(entry.faculty_id, entry.day, entry.time_slot), entry)
        self._by_room.setdefault(_slot_key(entry.room_id, entry.day, entry.time_slot), entry)
        self._sessions[(entry.batch_id, entry.subject_id)] += 1

    @property
    def entries(self) -> List[TimetableEntryOut]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def count_for(self, batch_id: str, subject_id: str) -> int:
        return self._sessions.get((batch_id, subject_id), 0)

    def find_batch(self, batch_id: str, day: DayOfWeek, time_slot: TimeSlot | str) -> TimetableEntryOut | None:
        return self._by_batch.get(_slot_key(batch_id, day, time_slot))

    def find_faculty(self, faculty_id: str, day: DayOfWeek, time_slot: TimeSlot | str) -> TimetableEntryOut | None:
        return self._by_faculty.get(_slot_key(faculty_id, day, time_slot))

    def find_room(self, room_id: str, day: DayOfWeek, time_slot: TimeSlot | str) -> TimetableEntryOut | None:
        return self._by_room.get(_slot_key(room_id, day, time_slot))


def detect_conflicts(
    working_set: WorkingSet,
    *,
    day: DayOfWeek,
    time_slot: TimeSlot | str,
    batch: BatchOut,
    faculty: FacultyOut,
    room: ClassroomOut | None = None,
) -> List[Conflict]:
    """Report every dimension on which the candidate placement collides.

    All checks run; an empty list means the slot is free for this batch and faculty
    (and room, when one is given).
    """
    day_label = DayOfWeek(day).value
    slot_label = str(time_slot)
    conflicts: List[Conflict] = []

    batch_hit = working_set.find_batch(batch.id, day, time_slot)
    if batch_hit is not None:
        conflicts.append(Conflict(
            type="batch",
            message=f"Batch {batch.department} {batch.semester} already has a class at {day_label} {slot_label}",
            entries=[batch_hit.id],
        ))

    faculty_hit = working_set.find_faculty(faculty.id, day, time_slot)
    if faculty_hit is not None:
        conflicts.append(Conflict(
            type="faculty",
            message=f"Faculty {faculty.name} already has a class at {day_label} {slot_label}",
            entries=[faculty_hit.id],
        ))

    if room is not None:
        room_hit = working_set.find_room(room.id, day, time_slot)
        if room_hit is not None:
            conflicts.append(Conflict(
                type="room",
                message=f"Room {room.name} already occupied at {day_label} {slot_label}",
                entries=[room_hit.id],
            ))

    return conflicts


def check_entry_conflicts(
    entries: Iterable[TimetableEntryOut],
    *,
    batches: Dict[str, BatchOut] | None = None,
    faculty: Dict[str, FacultyOut] | None = None,
    rooms: Dict[str, ClassroomOut] | None = None,
) -> List[Conflict]:
    """Audit a set of entries for double-bookings on batch, faculty and room."""
    batches = batches or {}
    faculty = faculty or {}
    rooms = rooms or {}

    def batch_label(batch_id: str) -> str:
        batch = batches.get(batch_id)
        return f"{batch.department} {batch.semester}" if batch else batch_id

    def faculty_label(faculty_id: str) -> str:
        member = faculty.get(faculty_id)
        return member.name if member else faculty_id

    def room_label(room_id: str) -> str:
        room = rooms.get(room_id)
        return room.name if room else room_id

    by_batch: Dict[SlotKey, List[str]] = defaultdict(list)
    by_faculty: Dict[SlotKey, List[str]] = defaultdict(list)
    by_room: Dict[SlotKey, List[str]] = defaultdict(list)
    for entry in entries:
        by_batch[_slot_key(entry.batch_id, entry.day, entry.time_slot)].append(entry.id)
        by_faculty[_slot_key(entry.faculty_id, entry.day, entry.time_slot)].append(entry.id)
        by_room[_slot_key(entry.room_id, entry.day, entry.time_slot)].append(entry.id)

    conflicts: List[Conflict] = []
    for (batch_id, day, slot), ids in by_batch.items():
        if len(ids) > 1:
            conflicts.append(Conflict(
                type="batch",
                message=f"Batch {batch_label(batch_id)} already has a class at {day.value} {slot}",
                entries=ids,
            ))
    for (faculty_id, day, slot), ids in by_faculty.items():
        if len(ids) > 1:
            conflicts.append(Conflict(
                type="faculty",
                message=f"Faculty {faculty_label(faculty_id)} already has a class at {day.value} {slot}",
                entries=ids,
            ))
    for (room_id, day, slot), ids in by_room.items():
        if len(ids) > 1:
            conflicts.append(Conflict(
                type="room",
                message=f"Room {room_label(room_id)} already occupied at {day.value} {slot}",
                entries=ids,
            ))
    return conflicts


def find_conflicts(
    store: "TimetableDataStore",
    *,
    day: DayOfWeek | None,
    time_slot: str | None,
    batch_id: str | None = None,
    faculty_id: str | None = None,
    room_id: str | None = None,
    exclude_id: str | None = None,
) -> List[Conflict]:
    """Check a prospective (or edited) entry against the stored timetable."""
    if not day or not time_slot:
        return []

    existing = [
        entry
        for entry in store.find_timetable_entries_at(DayOfWeek(day), time_slot)
        if exclude_id is None or entry.id != exclude_id
    ]
    conflicts: List[Conflict] = []

    if batch_id:
        hit = next((entry for entry in existing if entry.batch_id == batch_id), None)
        if hit is not None:
            conflicts.append(Conflict(type="batch", message="Batch already has a class at this time", entries=[hit.id]))

    if faculty_id:
        hit = next((entry for entry in existing if entry.faculty_id == faculty_id), None)
        if hit is not None:
            conflicts.append(Conflict(type="faculty", message="Faculty already has a class at this time", entries=[hit.id]))

    if room_id:
        hit = next((entry for entry in existing if entry.room_id == room_id), None)
        if hit is not None:
            conflicts.append(Conflict(type="room", message="Room already occupied at this time", entries=[hit.id]))

    logger.debug(
        "Conflict check day=%s slot=%s batch=%s faculty=%s room=%s -> %s",
        day,
        time_slot,
        batch_id,
        faculty_id,
        room_id,
        len(conflicts),
    )
    return conflicts
