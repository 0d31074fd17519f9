"""Pydantic schemas for equipment API."""
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

StatusName = Literal["operational", "maintenance", "faulty"]


class EquipmentCreate(BaseModel):
    """Payload for creating an equipment record."""

    equipment_code: str = Field(..., min_length=1, max_length=64)
    equipment_type: str = Field(..., min_length=1)
    status: StatusName = "operational"
    last_inspection_date: date | None = None
    next_inspection_date: date | None = None
    notes: str = ""


class EquipmentUpdate(BaseModel):
    """Payload for updating an equipment record (all fields optional). Location is fixed."""

    equipment_code: str | None = Field(default=None, min_length=1, max_length=64)
    equipment_type: str | None = None
    status: StatusName | None = None
    last_inspection_date: date | None = None
    next_inspection_date: date | None = None
    notes: str | None = None


class EquipmentResponse(BaseModel):
    """Equipment record in list/detail responses."""

    id: str
    location_id: str
    equipment_code: str
    equipment_type: str
    status: StatusName
    last_inspection_date: date | None = None
    next_inspection_date: date | None = None
    notes: str = ""
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
