"""Pydantic schemas for charging point API."""
from datetime import datetime

from pydantic import BaseModel


class ChargingPointCreate(BaseModel):
    """Payload for creating a charging point."""

    name: str


class ChargingPointUpdate(BaseModel):
    """Payload for renaming a charging point."""

    name: str


class ChargingPointResponse(BaseModel):
    """Charging point in API responses."""

    id: str
    name: str
    location_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
