from __future__ import annotations

import logging
import math
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from timex.core.exceptions import GenerationCancelledError
from timex.models.subject import SubjectType
from timex.models.timetable_entry import DayOfWeek
from timex.schemas.batch import BatchOut
from timex.schemas.classroom import ClassroomOut
from timex.schemas.faculty import FacultyOut
from timex.schemas.generator import GenerationPreferences
from timex.schemas.subject import SubjectOut
from timex.schemas.timetable import TimetableEntryOut
from timex.services.availability import has_availability_on, is_faculty_available
from timex.services.conflict_service import WorkingSet, detect_conflicts
from timex.services.room_selector import select_room
from timex.services.time_model import DAYS, TimeSlot

logger = logging.getLogger(__name__)

ENTRY_NAMESPACE = uuid.UUID("5b0f6a52-8c1e-4d55-9a43-0f3c1b7e2d10")


def session_length(subject_type: SubjectType) -> int:
    return 2 if subject_type == SubjectType.lab else 1


def required_sessions(subject: SubjectOut) -> int:
    return math.ceil(subject.weekly_hours / session_length(subject.type))


def entry_id_for(batch_id: str, subject_id: str, day: DayOfWeek, time_slot: str, room_id: str) -> str:
    # Derived from the placement itself so identical runs give identical ids.
    return str(uuid.uuid5(ENTRY_NAMESPACE, f"{batch_id}|{subject_id}|{day.value}|{time_slot}|{room_id}"))


@dataclass(frozen=True)
class Placement:
    day: DayOfWeek
    time_slot: TimeSlot
    room: ClassroomOut


@dataclass
class SubjectScheduleOutcome:
    entries: List[TimetableEntryOut] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class SessionScheduler:
    def __init__(
        self,
        *,
        catalog: Sequence[TimeSlot],
        preferences: GenerationPreferences | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.catalog = list(catalog)
        self.preferences = preferences or GenerationPreferences()
        self.cancel_event = cancel_event

    def day_order(self) -> List[DayOfWeek]:
        # prefer_morning_slots resolves to Monday-first, which is the natural order,
        # so both settings walk the week the same way.
        return list(DAYS)

    def find_placement(
        self,
        *,
        batch: BatchOut,
        faculty: FacultyOut,
        classrooms: List[ClassroomOut],
        working_set: WorkingSet,
    ) -> Placement | None:
        for day in self.day_order():
            if not has_availability_on(faculty.availability, day):
                continue
            for time_slot in self.catalog:
                if not is_faculty_available(faculty.availability, day, time_slot):
                    continue
                conflicts = detect_conflicts(
                    working_set,
                    day=day,
                    time_slot=time_slot,
                    batch=batch,
                    faculty=faculty,
                )
                if conflicts:
                    for conflict in conflicts:
                        logger.debug("Rejected candidate: %s", conflict.message)
                    continue
                room = select_room(
                    working_set,
                    day=day,
                    time_slot=time_slot,
                    classrooms=classrooms,
                    required_capacity=batch.student_count,
                )
                if room is not None:
                    return Placement(day=day, time_slot=time_slot, room=room)
        return None

    def schedule(
        self,
        *,
        batch: BatchOut,
        subject: SubjectOut,
        faculty_by_id: Dict[str, FacultyOut],
        classrooms: List[ClassroomOut],
        working_set: WorkingSet,
    ) -> SubjectScheduleOutcome:
        outcome = SubjectScheduleOutcome()
        faculty = faculty_by_id.get(subject.faculty_id)
        if faculty is None:
            outcome.warnings.append(f"No faculty found for subject: {subject.name}")
            return outcome

        required = required_sessions(subject)
        placed = working_set.count_for(batch.id, subject.id)
        if placed:
            logger.debug(
                "Subject %s already has %s/%s sessions for batch %s",
                subject.name,
                placed,
                required,
                batch.id,
            )

        while placed < required:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise GenerationCancelledError()

            placement = self.find_placement(
                batch=batch,
                faculty=faculty,
                classrooms=classrooms,
                working_set=working_set,
            )
            if placement is None:
                break

            slot_label = str(placement.time_slot)
            entry = TimetableEntryOut(
                id=entry_id_for(batch.id, subject.id, placement.day, slot_label, placement.room.id),
                batch_id=batch.id,
                subject_id=subject.id,
                faculty_id=faculty.id,
                room_id=placement.room.id,
                day=placement.day,
                time_slot=slot_label,
            )
            working_set.add(entry)
            outcome.entries.append(entry)
            placed += 1

        if placed < required:
            outcome.warnings.append(
                f"Could not schedule all sessions for {subject.name} in {batch.department} {batch.semester}"
            )
            logger.info(
                "Partial placement subject=%s batch=%s placed=%s required=%s",
                subject.name,
                batch.id,
                placed,
                required,
            )
        return outcome
