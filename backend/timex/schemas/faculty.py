from pydantic import BaseModel, Field, field_validator


class FacultyOut(BaseModel):
    id: str
    name: str = Field(min_length=1, max_length=200)
    department: str = Field(min_length=1, max_length=100)
    availability: dict[str, list[str]] = Field(default_factory=dict)
    leaves_per_month: int = Field(default=0, alias="leavesPerMonth", ge=0)

    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_validator("availability", mode="before")
    @classmethod
    def normalize_day_keys(cls, value: dict | None) -> dict:
        if not value:
            return {}
        normalized: dict[str, list[str]] = {}
        for day, ranges in value.items():
            key = str(day).strip().lower()
            normalized.setdefault(key, []).extend(
                str(item).strip() for item in (ranges or []) if str(item).strip()
            )
        return normalized
