from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

from timex.core.config import get_settings
from timex.schemas.conflict import Conflict
from timex.schemas.timetable import TimetableEntryOut


def default_time_slots() -> list[str]:
    return list(get_settings().default_time_slots)


class GenerationPreferences(BaseModel):
    # Only prefer_morning_slots is read by the scheduler; the others are accepted as-is.
    avoid_consecutive_classes: bool = Field(default=True, alias="avoidConsecutiveClasses")
    prefer_morning_slots: bool = Field(default=True, alias="preferMorningSlots")
    max_daily_hours: int = Field(default=8, alias="maxDailyHours")

    model_config = {"populate_by_name": True}


class GenerateTimetableRequest(BaseModel):
    batch_ids: list[str] = Field(default_factory=list, alias="batchIds")
    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")
    time_slots: list[str] = Field(default_factory=default_time_slots, alias="timeSlots")
    preferences: GenerationPreferences = Field(default_factory=GenerationPreferences)

    model_config = {"populate_by_name": True}

    @field_validator("batch_ids", "time_slots")
    @classmethod
    def strip_items(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value]

    @field_validator("preferences", mode="before")
    @classmethod
    def default_preferences(cls, value: object) -> object:
        return GenerationPreferences() if value is None else value

    @model_validator(mode="after")
    def validate_date_range(self) -> "GenerateTimetableRequest":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class GenerationResult(BaseModel):
    success: bool
    timetable: list[TimetableEntryOut] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    generation_time_ms: int = Field(default=0, alias="generationTimeMs", ge=0)

    model_config = {"populate_by_name": True}


class GenerateOptionsRequest(GenerateTimetableRequest):
    count: int = Field(default=3, ge=1, le=10)


class GenerationOption(GenerationResult):
    option: int = Field(ge=1)


class GenerateOptionsResponse(BaseModel):
    options: list[GenerationOption]
