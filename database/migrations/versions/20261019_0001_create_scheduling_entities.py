"""create scheduling entities

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    subject_type = sa.Enum("LECTURE", "LAB", "ELECTIVE", name="subject_type")
    room_type = sa.Enum("LECTURE_HALL", "LAB", name="room_type")
    day_of_week = sa.Enum(
        "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY",
        name="day_of_week",
    )

    op.create_table(
        "batches",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("student_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("department", "semester", name="uq_batches_department_semester"),
    )
    op.create_index("ix_batches_department", "batches", ["department"])

    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("leaves_per_month", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_faculty_department", "faculty", ["department"])

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", subject_type, nullable=False),
        sa.Column("weekly_hours", sa.Integer(), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_faculty_id", "subjects", ["faculty_id"])

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("type", room_type, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_classrooms_name", "classrooms", ["name"], unique=True)

    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("batch_id", sa.String(length=36), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=False),
        sa.Column("room_id", sa.String(length=36), nullable=False),
        sa.Column("day", day_of_week, nullable=False),
        sa.Column("time_slot", sa.String(length=11), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timetable_entries_batch_id", "timetable_entries", ["batch_id"])
    op.create_index("ix_timetable_entries_faculty_id", "timetable_entries", ["faculty_id"])
    op.create_index("ix_timetable_entries_room_id", "timetable_entries", ["room_id"])


def downgrade() -> None:
    op.drop_index("ix_timetable_entries_room_id", table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_faculty_id", table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_batch_id", table_name="timetable_entries")
    op.drop_table("timetable_entries")
    op.drop_index("ix_classrooms_name", table_name="classrooms")
    op.drop_table("classrooms")
    op.drop_index("ix_subjects_faculty_id", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_faculty_department", table_name="faculty")
    op.drop_table("faculty")
    op.drop_index("ix_batches_department", table_name="batches")
    op.drop_table("batches")

    sa.Enum(name="day_of_week").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="room_type").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="subject_type").drop(op.get_bind(), checkfirst=True)
