import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timex.db.base import Base, enum_values


class SubjectType(str, Enum):
    lecture = "LECTURE"
    lab = "LAB"
    elective = "ELECTIVE"


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[SubjectType] = mapped_column(SAEnum(SubjectType, name="subject_type", values_callable=enum_values), nullable=False)
    weekly_hours: Mapped[int] = mapped_column(Integer, nullable=False)
    faculty_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
