"""create booking tables

Revision ID: 3f1c2a7d9b10
Create Date: 2026-10-19 12:00:00.000000
"""

from alembic import op

import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1c2a7d9b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tutors",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("subject", sa.String(length=256), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("id"),
        mysql_collate="utf8mb4_bin",
    )
    op.create_table(
        "availability",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tutor_id", sa.String(length=36), nullable=False),
        sa.Column("day_of_week", sa.SmallInteger(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.ForeignKeyConstraint(["tutor_id"], ["tutors.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("id"),
        mysql_collate="utf8mb4_bin",
    )
    op.create_index("ix_availability_tutor_id", "availability", ["tutor_id"])
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tutor_id", sa.String(length=36), nullable=False),
        sa.Column("student_name", sa.String(length=256), nullable=False),
        sa.Column("student_email", sa.String(length=256), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("status", sa.Enum("CONFIRMED", "CANCELLED", name="bookingstatus"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["tutor_id"], ["tutors.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("id"),
        mysql_collate="utf8mb4_bin",
    )
    op.create_index(
        "bookings_unique_confirmed_start",
        "bookings",
        ["tutor_id", "start_time"],
        unique=True,
        sqlite_where=sa.text("status = 'CONFIRMED'"),
        postgresql_where=sa.text("status = 'CONFIRMED'"),
    )


def downgrade() -> None:
    op.drop_index("bookings_unique_confirmed_start", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_availability_tutor_id", table_name="availability")
    op.drop_table("availability")
    op.drop_table("tutors")
