import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import timex.models  # noqa: E402,F401
from timex.api.deps import get_db  # noqa: E402
from timex.db.base import Base  # noqa: E402
from timex.main import app  # noqa: E402
from timex.models.batch import Batch  # noqa: E402
from timex.models.classroom import Classroom, RoomType  # noqa: E402
from timex.models.faculty import Faculty  # noqa: E402
from timex.models.subject import Subject, SubjectType  # noqa: E402
from timex.models.timetable_entry import DayOfWeek, TimetableEntry  # noqa: E402

WEEKDAYS_9_TO_5 = {
    "monday": ["09:00-17:00"],
    "tuesday": ["09:00-17:00"],
    "wednesday": ["09:00-17:00"],
    "thursday": ["09:00-17:00"],
    "friday": ["09:00-17:00"],
}


class InMemoryDataStore:
    """Data store double holding pydantic records in plain lists."""

    def __init__(self, *, batches=None, subjects=None, classrooms=None, entries=None):
        self.batches = list(batches or [])
        self.subjects = list(subjects or [])
        self.classrooms = list(classrooms or [])
        self.entries = list(entries or [])

    def find_batches_by_ids(self, ids):
        wanted = set(ids)
        return [batch for batch in self.batches if batch.id in wanted]

    def find_all_subjects_with_faculty(self):
        return list(self.subjects)

    def find_classrooms_ordered_by_capacity_desc(self):
        return sorted(self.classrooms, key=lambda room: -room.capacity)

    def find_timetable_entries_for_batches(self, ids):
        wanted = set(ids)
        return [entry for entry in self.entries if entry.batch_id in wanted]

    def find_timetable_entries_at(self, day, time_slot):
        return [entry for entry in self.entries if entry.day == day and entry.time_slot == time_slot]


@pytest.fixture()
def memory_store():
    return InMemoryDataStore()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class Seeder:
    def __init__(self, db):
        self.db = db

    def _save(self, row):
        self.db.add(row)
        self.db.commit()
        return row

    def batch(self, id, department="CS", semester=5, student_count=40):
        return self._save(Batch(id=id, department=department, semester=semester, student_count=student_count))

    def faculty(self, id, name="Dr. Rao", department="CS", availability=None):
        if availability is None:
            availability = WEEKDAYS_9_TO_5
        return self._save(Faculty(id=id, name=name, department=department, availability=availability))

    def subject(self, id, faculty_id, name="Algorithms", type=SubjectType.lecture, weekly_hours=3):
        return self._save(Subject(id=id, name=name, type=type, weekly_hours=weekly_hours, faculty_id=faculty_id))

    def classroom(self, id, name="LH-101", capacity=60, type=RoomType.lecture_hall):
        return self._save(Classroom(id=id, name=name, capacity=capacity, type=type))

    def entry(self, id, batch_id, subject_id, faculty_id, room_id, day=DayOfWeek.monday, time_slot="09:00-10:00"):
        return self._save(
            TimetableEntry(
                id=id,
                batch_id=batch_id,
                subject_id=subject_id,
                faculty_id=faculty_id,
                room_id=room_id,
                day=day,
                time_slot=time_slot,
            )
        )


@pytest.fixture()
def seed(db_session):
    return Seeder(db_session)
