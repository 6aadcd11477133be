from enum import Enum

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def enum_values(enum_cls: type[Enum]) -> list[str]:
    # Persist enum values ("LECTURE") rather than member names ("lecture").
    return [item.value for item in enum_cls]
