from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from timex.core.config import get_settings
from timex.db.session import SessionLocal
from timex.services.data_store import SqlAlchemyDataStore, TimetableDataStore
from timex.services.timetable_generator import TimetableGenerator


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_data_store(db: Session = Depends(get_db)) -> TimetableDataStore:
    return SqlAlchemyDataStore(db)


def get_generator(store: TimetableDataStore = Depends(get_data_store)) -> TimetableGenerator:
    return TimetableGenerator(store, max_options=get_settings().max_generation_options)
