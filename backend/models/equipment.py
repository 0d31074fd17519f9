"""Equipment model: one battery-electric ground-support unit at a location."""
import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models import Base
from utils.clock import utcnow


class Equipment(Base):
    """equipment table: id, location_id, equipment_code (human-visible), type, status, inspection dates, notes, audit."""

    __tablename__ = "equipment"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    location_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("location.id"),
        nullable=False,
        index=True,
    )
    equipment_code: Mapped[str] = mapped_column(String(64), nullable=False)
    equipment_type: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="operational", index=True)
    last_inspection_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    next_inspection_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_by: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("user_profile.id"), nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("user_profile.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint("location_id", "equipment_code", name="uq_equipment_location_code"),
        CheckConstraint(
            "status IN ('operational', 'maintenance', 'faulty')",
            name="ck_equipment_status",
        ),
    )
