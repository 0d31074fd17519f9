"""User profile API routes: the caller's own profile and profile administration."""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_current_actor, get_current_profile
from db import get_db
from models.user_profile import UserProfile
from schemas.users import OwnProfileUpdate, ProfileCreate, ProfileResponse, ProfileUpdate
from tracker_core import profiles
from tracker_core.identity import Actor

router = APIRouter(tags=["users"])


def _profile_to_response(p) -> ProfileResponse:
    """Build ProfileResponse from model instance."""
    return ProfileResponse(
        id=p.id,
        email=p.email,
        full_name=p.full_name,
        role=p.role,
        location_id=p.location_id,
        is_active=p.is_active,
        charging_access=p.charging_access,
        swapping_access=p.swapping_access,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


@router.get("/me", response_model=ProfileResponse)
def read_me(profile: UserProfile = Depends(get_current_profile)) -> ProfileResponse:
    """The caller's profile. Available to inactive profiles too."""
    return _profile_to_response(profile)


@router.patch("/me", response_model=ProfileResponse)
def update_me(
    body: OwnProfileUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ProfileResponse:
    """Update the caller's display name."""
    return _profile_to_response(profiles.update_own_profile(db, actor, body.full_name))


@router.get("/users", response_model=list[ProfileResponse])
def list_users(
    location_id: Optional[str] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ProfileResponse]:
    """List profiles the caller administers."""
    return [_profile_to_response(p) for p in profiles.list_profiles(db, actor, location_id)]


@router.post("/users", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: ProfileCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ProfileResponse:
    """Create the profile for an identity-provider account."""
    return _profile_to_response(profiles.create_profile(db, actor, body.model_dump()))


@router.patch("/users/{profile_id}", response_model=ProfileResponse)
def update_user(
    profile_id: str,
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ProfileResponse:
    """Edit another profile's name, flags, and (super admin only) role or location."""
    fields = body.model_dump(exclude_unset=True)
    return _profile_to_response(profiles.update_profile(db, actor, profile_id, fields))
