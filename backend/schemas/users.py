"""Pydantic schemas for user profile API."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

RoleName = Literal["super_admin", "admin", "user"]


class ProfileCreate(BaseModel):
    """Payload for creating a profile. id is the identity provider's subject id for the account."""

    id: str = Field(..., min_length=1, max_length=36)
    email: str = Field(..., min_length=3)
    full_name: str = Field(..., min_length=1)
    role: RoleName = "user"
    location_id: str | None = None
    is_active: bool = True
    charging_access: bool = False
    swapping_access: bool = False


class ProfileUpdate(BaseModel):
    """Payload for editing another profile (all fields optional). role/location_id are super admin only."""

    full_name: str | None = None
    role: RoleName | None = None
    location_id: str | None = None
    is_active: bool | None = None
    charging_access: bool | None = None
    swapping_access: bool | None = None


class OwnProfileUpdate(BaseModel):
    """Self-service edit."""

    full_name: str = Field(..., min_length=1)


class ProfileResponse(BaseModel):
    """Profile in API responses."""

    id: str
    email: str
    full_name: str
    role: RoleName
    location_id: str | None
    is_active: bool
    charging_access: bool
    swapping_access: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
