"""ChargingSession model: one charging run of one equipment unit."""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from models import Base
from utils.clock import utcnow

OPEN_SESSION_INDEX = "uq_charging_session_open_equipment"


class ChargingSession(Base):
    """charging_session table. A row with end_time NULL is the equipment's open session."""

    __tablename__ = "charging_session"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    equipment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("equipment.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user_profile.id"), nullable=False, index=True)
    location_id: Mapped[str] = mapped_column(String(36), ForeignKey("location.id"), nullable=False, index=True)
    # Advisory tag; charging points may be renamed or deleted without touching history.
    charging_point_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    meter_reading_at_start: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    # Cache of end_time - start_time in whole minutes; the timestamps are authoritative.
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        # At most one open session per equipment, enforced by the database.
        Index(
            OPEN_SESSION_INDEX,
            "equipment_id",
            unique=True,
            sqlite_where=text("end_time IS NULL"),
            postgresql_where=text("end_time IS NULL"),
        ),
    )
