"""initial schema: students, attendances, users

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c2a7d1b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("roll_number", sa.String(length=30), nullable=False),
        sa.Column("register_number", sa.String(length=30), nullable=True),
        sa.Column("admission_year", sa.String(length=9), nullable=True),
        sa.Column("course_type", sa.String(length=30), nullable=True),
        sa.Column("course", sa.String(length=100), nullable=True),
        sa.Column("branch", sa.String(length=100), nullable=True),
        sa.Column("academic_year", sa.String(length=9), nullable=True),
        sa.Column("verification", sa.String(length=30), nullable=True),
        sa.Column("class_label", sa.String(length=30), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.UniqueConstraint("roll_number"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.String(length=30), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=True),
        sa.Column(
            "role",
            sa.Enum("admin", "teacher", name="user_role", create_constraint=True),
            nullable=False,
            server_default="teacher",
        ),
        sa.Column("auth_user_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.UniqueConstraint("staff_id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("auth_user_id"),
    )

    op.create_table(
        "attendances",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_name", sa.String(length=100), nullable=False),
        sa.Column("register_number", sa.String(length=30), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("Present", "Absent", name="attendance_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE", onupdate="CASCADE"),
        sa.UniqueConstraint("student_id", "date", name="unique_student_date"),
    )


def downgrade():
    op.drop_table("attendances")
    op.drop_table("users")
    op.drop_table("students")
