from fastapi import APIRouter, Depends, Query

from timex.api.deps import get_data_store
from timex.core.exceptions import AppError
from timex.models.timetable_entry import DayOfWeek
from timex.schemas.conflict import ConflictCheckResponse
from timex.services.conflict_service import find_conflicts
from timex.services.data_store import TimetableDataStore
from timex.services.time_model import SLOT_PATTERN

router = APIRouter()


@router.get("/conflicts", response_model=ConflictCheckResponse)
def check_conflicts(
    day: DayOfWeek | None = Query(default=None),
    time_slot: str | None = Query(default=None, alias="timeSlot"),
    batch_id: str | None = Query(default=None, alias="batchId"),
    faculty_id: str | None = Query(default=None, alias="facultyId"),
    room_id: str | None = Query(default=None, alias="roomId"),
    exclude_id: str | None = Query(default=None, alias="excludeId"),
    store: TimetableDataStore = Depends(get_data_store),
) -> ConflictCheckResponse:
    if time_slot and not SLOT_PATTERN.match(time_slot):
        raise AppError(
            f"Invalid time slot format: {time_slot}",
            status_code=400,
            details={"time_slot": time_slot},
        )
    conflicts = find_conflicts(
        store,
        day=day,
        time_slot=time_slot,
        batch_id=batch_id,
        faculty_id=faculty_id,
        room_id=room_id,
        exclude_id=exclude_id,
    )
    return ConflictCheckResponse(conflicts=conflicts)
