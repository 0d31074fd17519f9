"""UserProfile repository: get, list, create, update. Profiles are never deleted."""
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.user_profile import UserProfile


def get_profile(session: Session, profile_id: str) -> Optional[UserProfile]:
    """Return a profile by id (identity-provider subject id) or None."""
    return session.get(UserProfile, profile_id)


def get_profile_by_email(session: Session, email: str) -> Optional[UserProfile]:
    """Return a profile by email or None."""
    return session.execute(select(UserProfile).where(UserProfile.email == email)).scalars().first()


def list_profiles(
    session: Session,
    *,
    location_id: Optional[str] = None,
    role: Optional[str] = None,
) -> list[UserProfile]:
    """Return profiles, optionally filtered by location and role, ordered by name."""
    query = select(UserProfile).order_by(UserProfile.full_name)
    if location_id is not None:
        query = query.where(UserProfile.location_id == location_id)
    if role is not None:
        query = query.where(UserProfile.role == role)
    result = session.execute(query)
    return list(result.scalars().all())


def create_profile(
    session: Session,
    *,
    profile_id: str,
    email: str,
    full_name: str,
    role: str,
    location_id: Optional[str],
    is_active: bool = True,
    charging_access: bool = False,
    swapping_access: bool = False,
) -> UserProfile:
    """Create a profile, commit, and return it."""
    profile = UserProfile(
        id=profile_id,
        email=email,
        full_name=full_name,
        role=role,
        location_id=location_id,
        is_active=is_active,
        charging_access=charging_access,
        swapping_access=swapping_access,
    )
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


def update_profile(session: Session, profile_id: str, changes: dict[str, Any]) -> Optional[UserProfile]:
    """Apply column changes to a profile. Returns the updated profile or None if not found."""
    profile = get_profile(session, profile_id)
    if profile is None:
        return None
    for key, value in changes.items():
        setattr(profile, key, value)
    session.commit()
    session.refresh(profile)
    return profile
