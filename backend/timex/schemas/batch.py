from pydantic import BaseModel, Field


class BatchOut(BaseModel):
    id: str
    department: str = Field(min_length=1, max_length=100)
    semester: int = Field(ge=1)
    student_count: int = Field(alias="studentCount", ge=1)

    model_config = {"from_attributes": True, "populate_by_name": True}
