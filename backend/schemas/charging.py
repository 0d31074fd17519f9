"""Pydantic schemas for charging session API."""
from datetime import datetime

from pydantic import BaseModel


class StartChargingRequest(BaseModel):
    """Payload for starting a charging session. Values are validated by the controller."""

    charging_point_id: str | None = None
    meter_reading: str | float | None = None


class ChargingSessionResponse(BaseModel):
    """Charging session. duration_minutes is derived from the timestamps (running total while open)."""

    id: str
    equipment_id: str
    user_id: str
    location_id: str
    charging_point_id: str | None = None
    meter_reading_at_start: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    duration_minutes: int | None = None
    is_open: bool
