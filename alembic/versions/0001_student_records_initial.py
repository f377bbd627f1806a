"""create admins, students and auth_sessions

Revision ID: 0001_student_records
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_student_records"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


COURSES = ("System Development", "IT Security", "Networking", "AI & Data Science", "Full-Stack Dev")
STATUSES = ("Pending", "Awaiting Approval", "Active", "On-hold", "Suspended", "Graduated")


def _has_table(name: str) -> bool:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    return name in inspector.get_table_names()


def upgrade() -> None:
    if not _has_table("admins"):
        op.create_table(
            "admins",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("fullname", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_admins_email", "admins", ["email"], unique=True)

    if not _has_table("students"):
        op.create_table(
            "students",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("fullname", sa.String(length=255), nullable=False),
            sa.Column("id_number", sa.String(length=13), nullable=False),
            sa.Column("student_no", sa.String(length=64), nullable=False),
            sa.Column("date_of_birth", sa.Date(), nullable=True),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password", sa.String(length=255), nullable=True),
            sa.Column("course", sa.Enum(*COURSES, name="course", native_enum=False, length=64), nullable=True),
            sa.Column("course_summary", sa.Text(), nullable=True),
            sa.Column("enrollment_date", sa.Date(), nullable=True),
            sa.Column("registration_timestamp", sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column(
                "status",
                sa.Enum(*STATUSES, name="studentstatus", native_enum=False, length=32),
                nullable=False,
                server_default="Pending",
            ),
        )
        op.create_index("ix_students_id_number", "students", ["id_number"], unique=True)
        op.create_index("ix_students_student_no", "students", ["student_no"], unique=True)
        op.create_index("ix_students_email", "students", ["email"], unique=True)

    if not _has_table("auth_sessions"):
        op.create_table(
            "auth_sessions",
            sa.Column("id", sa.String(length=64), primary_key=True),
            sa.Column("role", sa.String(length=16), nullable=False),
            sa.Column("subject_id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("expires_at", sa.DateTime(), nullable=False),
            sa.Column("revoked_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_auth_sessions_role", "auth_sessions", ["role"])
        op.create_index("ix_auth_sessions_subject_id", "auth_sessions", ["subject_id"])


def downgrade() -> None:
    for name in ("auth_sessions", "students", "admins"):
        if _has_table(name):
            op.drop_table(name)
