from __future__ import annotations

import logging
import threading
from time import perf_counter
from typing import Dict, List

from timex.core.exceptions import (
    GenerationCancelledError,
    GenerationValidationError,
    ResourceNotFoundError,
)
from timex.schemas.batch import BatchOut
from timex.schemas.conflict import Conflict
from timex.schemas.faculty import FacultyOut
from timex.schemas.generator import GenerateTimetableRequest, GenerationOption, GenerationResult
from timex.schemas.timetable import TimetableEntryOut
from timex.services.conflict_service import WorkingSet, check_entry_conflicts
from timex.services.curriculum import CurriculumResolver, DepartmentCurriculumResolver
from timex.services.data_store import TimetableDataStore
from timex.services.room_selector import order_rooms
from timex.services.session_scheduler import SessionScheduler
from timex.services.time_model import SLOT_PATTERN, TimeSlot, build_catalog

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((perf_counter() - started) * 1000)


class TimetableGenerator:
    """Greedy, single-pass timetable generation over a read-only data store.

    Holds no per-run state: every call to ``generate`` builds its own working set,
    so independent runs can proceed side by side.
    """

    def __init__(
        self,
        store: TimetableDataStore,
        *,
        curriculum: CurriculumResolver | None = None,
        max_options: int = 5,
    ) -> None:
        self.store = store
        self.curriculum = curriculum or DepartmentCurriculumResolver()
        self.max_options = max_options

    def validate_request(self, request: GenerateTimetableRequest) -> List[TimeSlot]:
        if not request.batch_ids:
            raise GenerationValidationError("At least one batch ID is required")
        if any(not batch_id for batch_id in request.batch_ids):
            raise GenerationValidationError("Batch IDs must be non-empty strings")
        if not request.time_slots:
            raise GenerationValidationError("At least one time slot is required")
        for slot in request.time_slots:
            if not SLOT_PATTERN.match(slot):
                raise GenerationValidationError(
                    f"Invalid time slot format: {slot}",
                    details={"time_slot": slot},
                )
        return build_catalog(request.time_slots)

    @staticmethod
    def _failed_result(started: float, conflicts: List[Conflict], warnings: List[str]) -> GenerationResult:
        return GenerationResult(
            success=False,
            timetable=[],
            conflicts=conflicts,
            warnings=warnings,
            generation_time_ms=_elapsed_ms(started),
        )

    def _load_batches(self, batch_ids: List[str]) -> List[BatchOut]:
        requested = list(dict.fromkeys(batch_ids))
        found = {batch.id: batch for batch in self.store.find_batches_by_ids(requested)}
        missing = [batch_id for batch_id in requested if batch_id not in found]
        if missing:
            raise ResourceNotFoundError("Batch", missing)
        # Request order drives placement priority.
        return [found[batch_id] for batch_id in requested]

    def generate(
        self,
        request: GenerateTimetableRequest,
        *,
        cancel_event: threading.Event | None = None,
    ) -> GenerationResult:
        started = perf_counter()
        catalog = self.validate_request(request)

        conflicts: List[Conflict] = []
        warnings: List[str] = []
        logger.info(
            "Starting timetable generation batches=%s slots=%s prefer_morning=%s",
            len(request.batch_ids),
            len(catalog),
            request.preferences.prefer_morning_slots,
        )

        try:
            batches = self._load_batches(request.batch_ids)
            batch_ids = [batch.id for batch in batches]
            subjects = self.store.find_all_subjects_with_faculty()
            faculty_by_id: Dict[str, FacultyOut] = {
                subject.faculty.id: subject.faculty for subject in subjects if subject.faculty is not None
            }
            classrooms = order_rooms(self.store.find_classrooms_ordered_by_capacity_desc())
            existing = self.store.find_timetable_entries_for_batches(batch_ids)

            conflicts.extend(
                check_entry_conflicts(
                    existing,
                    batches={batch.id: batch for batch in batches},
                    faculty=faculty_by_id,
                    rooms={room.id: room for room in classrooms},
                )
            )
            working_set = WorkingSet(existing)
            scheduler = SessionScheduler(
                catalog=catalog,
                preferences=request.preferences,
                cancel_event=cancel_event,
            )

            timetable: List[TimetableEntryOut] = []
            for batch in batches:
                for subject in self.curriculum.subjects_for(batch, subjects):
                    outcome = scheduler.schedule(
                        batch=batch,
                        subject=subject,
                        faculty_by_id=faculty_by_id,
                        classrooms=classrooms,
                        working_set=working_set,
                    )
                    timetable.extend(outcome.entries)
                    warnings.extend(outcome.warnings)
        except ResourceNotFoundError:
            raise
        except GenerationCancelledError as exc:
            logger.warning("Timetable generation cancelled after %sms", _elapsed_ms(started))
            warnings.append(exc.message)
            return self._failed_result(started, conflicts, warnings)
        except Exception:
            logger.exception("Timetable generation failed after %sms", _elapsed_ms(started))
            return self._failed_result(started, conflicts, warnings)

        generation_time_ms = _elapsed_ms(started)
        logger.info(
            "Timetable generation completed entries=%s conflicts=%s warnings=%s time_ms=%s",
            len(timetable),
            len(conflicts),
            len(warnings),
            generation_time_ms,
        )
        return GenerationResult(
            success=True,
            timetable=timetable,
            conflicts=conflicts,
            warnings=warnings,
            generation_time_ms=generation_time_ms,
        )

    def generate_options(self, request: GenerateTimetableRequest, count: int) -> List[GenerationOption]:
        """Run independent generations, alternating the morning preference per option."""
        if count < 1 or count > self.max_options:
            raise GenerationValidationError(
                f"Option count must be between 1 and {self.max_options}",
                details={"count": count},
            )

        options: List[GenerationOption] = []
        for option in range(1, count + 1):
            preferences = request.preferences.model_copy(
                update={"prefer_morning_slots": (option - 1) % 2 == 0}
            )
            result = self.generate(request.model_copy(update={"preferences": preferences}))
            options.append(
                GenerationOption(
                    option=option,
                    success=result.success,
                    timetable=result.timetable,
                    conflicts=result.conflicts,
                    warnings=result.warnings,
                    generation_time_ms=result.generation_time_ms,
                )
            )
        logger.info("Generated %s timetable option(s)", len(options))
        return options
