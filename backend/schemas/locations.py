"""Pydantic schemas for location API."""
from datetime import datetime

from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    """Payload for creating a location."""

    code: str = Field(..., min_length=1, max_length=16)
    name: str = Field(..., min_length=1)


class LocationUpdate(BaseModel):
    """Payload for activating or deactivating a location."""

    is_active: bool


class LocationResponse(BaseModel):
    """Location in API responses."""

    id: str
    code: str
    name: str
    is_active: bool
    created_at: datetime | None = None
    equipment_count: int = 0
