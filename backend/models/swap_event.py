"""SwapEvent model: one battery swap, append-only."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from models import Base
from utils.clock import utcnow


class SwapEvent(Base):
    """swap_event table: sequence id, actor, location, equipment, count (always 1), meter reading, battery number."""

    __tablename__ = "swap_event"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user_profile.id"), nullable=False)
    location_id: Mapped[str] = mapped_column(String(36), ForeignKey("location.id"), nullable=False, index=True)
    equipment_id: Mapped[str] = mapped_column(String(36), ForeignKey("equipment.id"), nullable=False, index=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    meter_reading: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    battery_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
