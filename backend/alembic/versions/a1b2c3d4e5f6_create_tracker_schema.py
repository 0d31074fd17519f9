"""create_tracker_schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create location, user_profile, equipment, charging_point, charging_session and swap_event."""
    op.create_table(
        "location",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "user_profile",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("charging_access", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("swapping_access", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role IN ('super_admin', 'admin', 'user')", name="ck_user_profile_role"),
        sa.CheckConstraint(
            "(role = 'super_admin' AND location_id IS NULL) "
            "OR (role <> 'super_admin' AND location_id IS NOT NULL)",
            name="ck_user_profile_role_location",
        ),
        sa.ForeignKeyConstraint(["location_id"], ["location.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_profile_location_id", "user_profile", ["location_id"])
    op.create_table(
        "equipment",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("equipment_code", sa.String(length=64), nullable=False),
        sa.Column("equipment_type", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="operational"),
        sa.Column("last_inspection_date", sa.Date(), nullable=True),
        sa.Column("next_inspection_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        sa.Column("updated_by", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("status IN ('operational', 'maintenance', 'faulty')", name="ck_equipment_status"),
        sa.ForeignKeyConstraint(["location_id"], ["location.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["user_profile.id"]),
        sa.ForeignKeyConstraint(["updated_by"], ["user_profile.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("location_id", "equipment_code", name="uq_equipment_location_code"),
    )
    op.create_index("ix_equipment_location_id", "equipment", ["location_id"])
    op.create_index("ix_equipment_status", "equipment", ["status"])
    op.create_table(
        "charging_point",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["location_id"], ["location.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_charging_point_location_id", "charging_point", ["location_id"])
    op.create_table(
        "charging_session",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("equipment_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("charging_point_id", sa.String(length=36), nullable=True),
        sa.Column("meter_reading_at_start", sa.Numeric(10, 2), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["equipment_id"], ["equipment.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["location.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_charging_session_equipment_id", "charging_session", ["equipment_id"])
    op.create_index("ix_charging_session_user_id", "charging_session", ["user_id"])
    op.create_index("ix_charging_session_location_id", "charging_session", ["location_id"])
    op.create_index("ix_charging_session_charging_point_id", "charging_session", ["charging_point_id"])
    op.create_index("ix_charging_session_start_time", "charging_session", ["start_time"])
    op.create_table(
        "swap_event",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("equipment_id", sa.String(length=36), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("meter_reading", sa.Numeric(10, 2), nullable=True),
        sa.Column("battery_number", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["location.id"]),
        sa.ForeignKeyConstraint(["equipment_id"], ["equipment.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_swap_event_location_id", "swap_event", ["location_id"])
    op.create_index("ix_swap_event_equipment_id", "swap_event", ["equipment_id"])
    op.create_index("ix_swap_event_created_at", "swap_event", ["created_at"])


def downgrade() -> None:
    """Drop the tracker schema."""
    op.drop_table("swap_event", if_exists=True)
    op.drop_table("charging_session", if_exists=True)
    op.drop_table("charging_point", if_exists=True)
    op.drop_table("equipment", if_exists=True)
    op.drop_table("user_profile", if_exists=True)
    op.drop_table("location", if_exists=True)
