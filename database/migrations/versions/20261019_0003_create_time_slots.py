"""create time slots

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0003"
down_revision = "20261019_0002"
branch_labels = None
depends_on = None


time_slot_day = sa.Enum("MON", "TUE", "WED", "THU", "FRI", "SAT", name="time_slot_day")
time_slot_type = sa.Enum("PERIOD", "BREAK", "LUNCH", name="time_slot_type")


def upgrade() -> None:
    op.create_table(
        "time_slots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("class_id", sa.Integer(), sa.ForeignKey("classes.id", ondelete="CASCADE"), nullable=True),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("day", time_slot_day, nullable=False),
        sa.Column("type", time_slot_type, nullable=False, server_default="PERIOD"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_time_slots_class_id", "time_slots", ["class_id"])


def downgrade() -> None:
    op.drop_index("ix_time_slots_class_id", table_name="time_slots")
    op.drop_table("time_slots")
    time_slot_type.drop(op.get_bind(), checkfirst=True)
    time_slot_day.drop(op.get_bind(), checkfirst=True)
