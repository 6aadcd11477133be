from pydantic import BaseModel, Field

from timex.models.classroom import RoomType


class ClassroomOut(BaseModel):
    id: str
    name: str = Field(min_length=1, max_length=50)
    capacity: int = Field(ge=1)
    type: RoomType

    model_config = {"from_attributes": True}
