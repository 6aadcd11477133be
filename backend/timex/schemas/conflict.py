from typing import List, Literal

from pydantic import BaseModel, Field

ConflictType = Literal["batch", "faculty", "room"]


class Conflict(BaseModel):
    type: ConflictType
    message: str
    entries: List[str] = Field(default_factory=list)  # ids of the colliding timetable entries


class ConflictCheckResponse(BaseModel):
    conflicts: List[Conflict]
