from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine

import timex.models  # noqa: F401
from timex.db.base import Base

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "batches": {"id", "department", "semester", "student_count"},
    "faculty": {"id", "name", "department", "availability", "leaves_per_month"},
    "subjects": {"id", "name", "type", "weekly_hours", "faculty_id"},
    "classrooms": {"id", "name", "capacity", "type"},
    "timetable_entries": {"id", "batch_id", "subject_id", "faculty_id", "room_id", "day", "time_slot"},
}


def find_schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return sorted(missing_tables), missing_columns


def _ensure_faculty_leaves_column(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "faculty" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("faculty")}
        if "leaves_per_month" in column_names:
            return
        logger.info("Adding faculty.leaves_per_month column")
        connection.execute(
            text("ALTER TABLE faculty ADD COLUMN leaves_per_month INTEGER NOT NULL DEFAULT 0")
        )


def _assert_required_columns(engine: Engine) -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = find_schema_gaps(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flattened = [
            f"{table_name}.{column_name}"
            for table_name, columns in sorted(missing_columns.items())
            for column_name in columns
        ]
        raise RuntimeError(f"Missing required columns: {', '.join(flattened)}")


def ensure_schema(engine: Engine) -> None:
    try:
        # Ensure missing tables are present before additive compatibility patches.
        Base.metadata.create_all(bind=engine)
        _ensure_faculty_leaves_column(engine)
        _assert_required_columns(engine)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Schema bootstrap failed")
        raise RuntimeError("Schema bootstrap failed") from exc
