"""create school tables

Revision ID: 3f9a2c1d7b4e
Revises:
Create Date: 2026-03-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9a2c1d7b4e"
down_revision = None
branch_labels = None
depends_on = None


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
    ]


def upgrade():
    op.create_table(
        "students",
        sa.Column("student_id", sa.Integer(), primary_key=True),
        sa.Column("roll", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("grade", sa.String(length=20), nullable=False),
        sa.Column("attendance", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("allocated_class_id", sa.Integer(), nullable=True),
        *timestamps(),
        sa.UniqueConstraint("roll", name="uq_students_roll"),
        sa.CheckConstraint("attendance >= 0 AND attendance <= 100", name="ck_student_attendance"),
    )

    op.create_table(
        "teachers",
        sa.Column("teacher_id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("subject", sa.String(length=50), nullable=False),
        sa.Column("classes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("experience", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("phone", sa.String(length=20), nullable=False),
        *timestamps(),
        sa.UniqueConstraint("employee_id", name="uq_teachers_employee_id"),
        sa.CheckConstraint("classes >= 0", name="ck_teacher_classes"),
        sa.CheckConstraint("experience >= 0", name="ck_teacher_experience"),
    )

    op.create_table(
        "classes",
        sa.Column("class_id", sa.Integer(), primary_key=True),
        sa.Column("class_name", sa.String(length=20), nullable=False),
        sa.Column("grade", sa.String(length=20), nullable=False),
        sa.Column("room", sa.String(length=30), nullable=False),
        sa.Column("class_teacher", sa.String(length=100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("enrolled", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *timestamps(),
        sa.UniqueConstraint("class_name", name="uq_classes_class_name"),
        sa.CheckConstraint("capacity >= 1", name="ck_class_capacity"),
        sa.CheckConstraint("enrolled >= 0", name="ck_class_enrolled"),
    )
    op.create_index("ix_classes_grade", "classes", ["grade"])

    op.create_table(
        "announcements",
        sa.Column("announcement_id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=150), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("audience", sa.String(length=30), nullable=False),
        sa.Column("date", sa.String(length=10), nullable=False),
        *timestamps(),
        sa.UniqueConstraint("title", name="uq_announcements_title"),
    )


def downgrade():
    op.drop_table("announcements")
    op.drop_index("ix_classes_grade", table_name="classes")
    op.drop_table("classes")
    op.drop_table("teachers")
    op.drop_table("students")
