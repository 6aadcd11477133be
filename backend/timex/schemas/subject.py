from pydantic import BaseModel, Field

from timex.models.subject import SubjectType
from timex.schemas.faculty import FacultyOut


class SubjectOut(BaseModel):
    id: str
    name: str = Field(min_length=1, max_length=100)
    type: SubjectType
    weekly_hours: int = Field(alias="weeklyHours", ge=1)
    faculty_id: str = Field(alias="facultyId")
    faculty: FacultyOut | None = None

    model_config = {"from_attributes": True, "populate_by_name": True}
