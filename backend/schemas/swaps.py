"""Pydantic schemas for battery swap API."""
from datetime import datetime

from pydantic import BaseModel


class SwapCreate(BaseModel):
    """Payload for recording a swap. Values are validated by the controller."""

    meter_reading: str | float | None = None
    battery_number: str | None = None


class SwapEventResponse(BaseModel):
    """One swap event."""

    id: int
    user_id: str
    location_id: str
    equipment_id: str
    count: int
    meter_reading: str | None = None
    battery_number: str | None = None
    created_at: datetime


class SwapTotalResponse(BaseModel):
    """Total swaps for one equipment unit."""

    equipment_id: str
    total_swaps: int


class SwapLogResponse(BaseModel):
    """Swap log report: rows plus their total count."""

    total_swaps: int
    items: list[SwapEventResponse]
