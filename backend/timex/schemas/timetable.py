from pydantic import BaseModel, Field

from timex.models.timetable_entry import DayOfWeek


class TimetableEntryOut(BaseModel):
    id: str
    batch_id: str = Field(alias="batchId")
    subject_id: str = Field(alias="subjectId")
    faculty_id: str = Field(alias="facultyId")
    room_id: str = Field(alias="roomId")
    day: DayOfWeek
    time_slot: str = Field(alias="timeSlot")

    model_config = {"from_attributes": True, "populate_by_name": True}
