import threading

import pytest

from timex.core.exceptions import GenerationCancelledError
from timex.models.classroom import RoomType
from timex.models.subject import SubjectType
from timex.models.timetable_entry import DayOfWeek
from timex.schemas.batch import BatchOut
from timex.schemas.classroom import ClassroomOut
from timex.schemas.faculty import FacultyOut
from timex.schemas.generator import GenerationPreferences
from timex.schemas.subject import SubjectOut
from timex.schemas.timetable import TimetableEntryOut
from timex.services.conflict_service import WorkingSet
from timex.services.session_scheduler import (
    SessionScheduler,
    entry_id_for,
    required_sessions,
    session_length,
)
from timex.services.time_model import DAYS, DEFAULT_TIME_SLOTS, build_catalog

WEEKDAYS = {day: ["09:00-17:00"] for day in ("monday", "tuesday", "wednesday", "thursday", "friday")}


def make_batch(batch_id="b1", department="CS", semester=5, student_count=40):
    return BatchOut(id=batch_id, department=department, semester=semester, student_count=student_count)


def make_faculty(faculty_id="f1", availability=None):
    return FacultyOut(
        id=faculty_id,
        name="Dr. Rao",
        department="CS",
        availability=WEEKDAYS if availability is None else availability,
    )


def make_subject(subject_id="s1", subject_type=SubjectType.lecture, weekly_hours=3, faculty_id="f1", name="Algorithms"):
    return SubjectOut(id=subject_id, name=name, type=subject_type, weekly_hours=weekly_hours, faculty_id=faculty_id)


def make_room(room_id="r1", capacity=60):
    return ClassroomOut(id=room_id, name=f"Room {room_id}", capacity=capacity, type=RoomType.lecture_hall)


def run(subject, *, batch=None, faculty=None, rooms=None, working_set=None, scheduler=None):
    batch = batch or make_batch()
    faculty = faculty or make_faculty()
    working_set = working_set if working_set is not None else WorkingSet()
    scheduler = scheduler or SessionScheduler(catalog=DEFAULT_TIME_SLOTS)
    outcome = scheduler.schedule(
        batch=batch,
        subject=subject,
        faculty_by_id={faculty.id: faculty},
        classrooms=rooms if rooms is not None else [make_room()],
        working_set=working_set,
    )
    return outcome, working_set


@pytest.mark.parametrize(
    "subject_type, weekly_hours, expected_length, expected_sessions",
    [
        (SubjectType.lecture, 3, 1, 3),
        (SubjectType.elective, 2, 1, 2),
        (SubjectType.lab, 4, 2, 2),
        (SubjectType.lab, 3, 2, 2),
    ],
)
def test_session_length_and_count(subject_type, weekly_hours, expected_length, expected_sessions):
    subject = make_subject(subject_type=subject_type, weekly_hours=weekly_hours)
    assert session_length(subject_type) == expected_length
    assert required_sessions(subject) == expected_sessions


def test_lecture_places_three_sessions_first_fit():
    outcome, working_set = run(make_subject(weekly_hours=3))
    assert outcome.warnings == []
    assert [(entry.day, entry.time_slot) for entry in outcome.entries] == [
        (DayOfWeek.monday, "09:00-10:00"),
        (DayOfWeek.monday, "10:00-11:00"),
        (DayOfWeek.monday, "11:00-12:00"),
    ]
    assert len(working_set) == 3
    assert {entry.room_id for entry in outcome.entries} == {"r1"}


def test_lab_places_two_sessions():
    outcome, _ = run(make_subject(subject_type=SubjectType.lab, weekly_hours=4))
    assert len(outcome.entries) == 2
    assert outcome.warnings == []


def test_missing_faculty_warns_and_places_nothing():
    scheduler = SessionScheduler(catalog=DEFAULT_TIME_SLOTS)
    working_set = WorkingSet()
    outcome = scheduler.schedule(
        batch=make_batch(),
        subject=make_subject(faculty_id="ghost", name="Compilers"),
        faculty_by_id={},
        classrooms=[make_room()],
        working_set=working_set,
    )
    assert outcome.entries == []
    assert outcome.warnings == ["No faculty found for subject: Compilers"]
    assert len(working_set) == 0


def test_unavailable_faculty_yields_shortfall_warning():
    outcome, _ = run(make_subject(name="Networks"), faculty=make_faculty(availability={}))
    assert outcome.entries == []
    assert outcome.warnings == ["Could not schedule all sessions for Networks in CS 5"]


def test_small_room_yields_shortfall_warning():
    outcome, _ = run(make_subject(name="Networks"), rooms=[make_room(capacity=20)])
    assert outcome.entries == []
    assert outcome.warnings == ["Could not schedule all sessions for Networks in CS 5"]


def test_stops_after_first_unplaceable_session():
    faculty = make_faculty(availability={"monday": ["09:00-11:00"]})
    outcome, _ = run(make_subject(weekly_hours=4), faculty=faculty)
    assert [entry.time_slot for entry in outcome.entries] == ["09:00-10:00", "10:00-11:00"]
    assert len(outcome.warnings) == 1


def test_days_without_availability_are_skipped():
    faculty = make_faculty(availability={"thursday": ["14:00-15:00"], "saturday": ["08:00-09:00"]})
    outcome, _ = run(make_subject(weekly_hours=2), faculty=faculty)
    assert [(entry.day, entry.time_slot) for entry in outcome.entries] == [
        (DayOfWeek.thursday, "14:00-15:00"),
        (DayOfWeek.saturday, "08:00-09:00"),
    ]


def test_existing_entries_block_slots():
    blocker = TimetableEntryOut(
        id="existing",
        batch_id="b1",
        subject_id="s-other",
        faculty_id="f-other",
        room_id="r-other",
        day=DayOfWeek.monday,
        time_slot="09:00-10:00",
    )
    outcome, _ = run(make_subject(weekly_hours=1), working_set=WorkingSet([blocker]))
    assert [(entry.day, entry.time_slot) for entry in outcome.entries] == [(DayOfWeek.monday, "10:00-11:00")]


def test_sessions_already_in_working_set_count_toward_requirement():
    placed = [
        TimetableEntryOut(
            id=f"existing-{index}",
            batch_id="b1",
            subject_id="s1",
            faculty_id="f1",
            room_id="r1",
            day=DayOfWeek.tuesday,
            time_slot=slot,
        )
        for index, slot in enumerate(["09:00-10:00", "10:00-11:00"])
    ]
    outcome, working_set = run(make_subject(weekly_hours=3), working_set=WorkingSet(placed))
    assert len(outcome.entries) == 1
    assert outcome.warnings == []
    assert working_set.count_for("b1", "s1") == 3


def test_custom_catalog_restricts_slots():
    scheduler = SessionScheduler(catalog=build_catalog(["13:00-14:00"]))
    outcome, _ = run(make_subject(weekly_hours=3), scheduler=scheduler)
    assert [(entry.day, entry.time_slot) for entry in outcome.entries] == [
        (DayOfWeek.monday, "13:00-14:00"),
        (DayOfWeek.tuesday, "13:00-14:00"),
        (DayOfWeek.wednesday, "13:00-14:00"),
    ]


def test_day_order_ignores_morning_preference():
    morning = SessionScheduler(catalog=DEFAULT_TIME_SLOTS, preferences=GenerationPreferences(prefer_morning_slots=True))
    plain = SessionScheduler(catalog=DEFAULT_TIME_SLOTS, preferences=GenerationPreferences(prefer_morning_slots=False))
    assert morning.day_order() == plain.day_order() == list(DAYS)


def test_entry_ids_are_deterministic():
    first, _ = run(make_subject())
    second, _ = run(make_subject())
    assert [entry.id for entry in first.entries] == [entry.id for entry in second.entries]
    assert first.entries[0].id == entry_id_for("b1", "s1", DayOfWeek.monday, "09:00-10:00", "r1")


def test_cancel_event_stops_at_session_boundary():
    cancel = threading.Event()
    cancel.set()
    scheduler = SessionScheduler(catalog=DEFAULT_TIME_SLOTS, cancel_event=cancel)
    with pytest.raises(GenerationCancelledError):
        run(make_subject(), scheduler=scheduler)
