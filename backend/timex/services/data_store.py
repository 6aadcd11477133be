from __future__ import annotations

from typing import List, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from timex.models.batch import Batch
from timex.models.classroom import Classroom
from timex.models.faculty import Faculty
from timex.models.subject import Subject
from timex.models.timetable_entry import DayOfWeek, TimetableEntry
from timex.schemas.batch import BatchOut
from timex.schemas.classroom import ClassroomOut
from timex.schemas.faculty import FacultyOut
from timex.schemas.subject import SubjectOut
from timex.schemas.timetable import TimetableEntryOut


class TimetableDataStore(Protocol):
    """Read-only view of the entities the generator needs."""

    def find_batches_by_ids(self, ids: Sequence[str]) -> List[BatchOut]:
        ...

    def find_all_subjects_with_faculty(self) -> List[SubjectOut]:
        ...

    def find_classrooms_ordered_by_capacity_desc(self) -> List[ClassroomOut]:
        ...

    def find_timetable_entries_for_batches(self, ids: Sequence[str]) -> List[TimetableEntryOut]:
        ...

    def find_timetable_entries_at(self, day: DayOfWeek, time_slot: str) -> List[TimetableEntryOut]:
        ...


class SqlAlchemyDataStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_batches_by_ids(self, ids: Sequence[str]) -> List[BatchOut]:
        if not ids:
            return []
        rows = self.db.execute(select(Batch).where(Batch.id.in_(list(ids)))).scalars().all()
        return [BatchOut.model_validate(row) for row in rows]

    def find_all_subjects_with_faculty(self) -> List[SubjectOut]:
        # Creation order is the load order; id breaks ties within one timestamp.
        subjects = self.db.execute(
            select(Subject).order_by(Subject.created_at, Subject.id)
        ).scalars().all()
        faculty_ids = sorted({subject.faculty_id for subject in subjects})
        faculty_map: dict[str, FacultyOut] = {}
        if faculty_ids:
            faculty_rows = self.db.execute(select(Faculty).where(Faculty.id.in_(faculty_ids))).scalars().all()
            faculty_map = {row.id: FacultyOut.model_validate(row) for row in faculty_rows}

        results: List[SubjectOut] = []
        for subject in subjects:
            item = SubjectOut.model_validate(subject)
            item.faculty = faculty_map.get(subject.faculty_id)
            results.append(item)
        return results

    def find_classrooms_ordered_by_capacity_desc(self) -> List[ClassroomOut]:
        rows = self.db.execute(
            select(Classroom).order_by(Classroom.capacity.desc(), Classroom.created_at, Classroom.id)
        ).scalars().all()
        return [ClassroomOut.model_validate(row) for row in rows]

    def find_timetable_entries_for_batches(self, ids: Sequence[str]) -> List[TimetableEntryOut]:
        if not ids:
            return []
        rows = self.db.execute(
            select(TimetableEntry)
            .where(TimetableEntry.batch_id.in_(list(ids)))
            .order_by(TimetableEntry.created_at, TimetableEntry.id)
        ).scalars().all()
        return [TimetableEntryOut.model_validate(row) for row in rows]

    def find_timetable_entries_at(self, day: DayOfWeek, time_slot: str) -> List[TimetableEntryOut]:
        rows = self.db.execute(
            select(TimetableEntry)
            .where(TimetableEntry.day == day, TimetableEntry.time_slot == time_slot)
            .order_by(TimetableEntry.created_at, TimetableEntry.id)
        ).scalars().all()
        return [TimetableEntryOut.model_validate(row) for row in rows]
