"""Profile and location administration under the role-mutation rules."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from models.location import Location
from models.user_profile import UserProfile
from repositories import location_repository as locations_repo
from repositories import user_profile_repository as profiles_repo
from tracker_core import access_policy as policy
from tracker_core.errors import ConflictError, NotFound, ValidationError, upstream_errors
from tracker_core.identity import Actor
from tracker_core.roles import Role, role_requires_location

LOG = logging.getLogger(__name__)

_FLAG_FIELDS = ("is_active", "charging_access", "swapping_access")


def _parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError as e:
        raise ValidationError("role", f"Role must be one of: {', '.join(r.value for r in Role)}") from e


def _clean_text(field: str, value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(field, f"{field.replace('_', ' ').capitalize()} is required")
    return text


def _resolve_location(db: Session, role: Role, location_id: Optional[str]) -> Optional[str]:
    """super_admin gets no location; admin and user need an existing one."""
    if not role_requires_location(role):
        return None
    if not location_id:
        raise ValidationError("location_id", f"A location is required for role {role.value}")
    if locations_repo.get_location(db, location_id) is None:
        raise NotFound("location")
    return location_id


# Locations


def list_visible_locations(db: Session, actor: Actor) -> list[Location]:
    """super_admin sees every location; others see only their own."""
    policy.require(policy.check_active(actor))
    with upstream_errors("list locations"):
        if actor.is_super_admin:
            return locations_repo.list_locations(db)
        loc = locations_repo.get_location(db, actor.location_id)
        return [loc] if loc is not None else []


def create_location(db: Session, actor: Actor, code: Any, name: Any) -> Location:
    policy.require(policy.can_manage_locations(actor))
    clean_code = _clean_text("code", code).upper()
    clean_name = _clean_text("name", name)
    with upstream_errors("create location"):
        if locations_repo.get_location_by_code(db, clean_code) is not None:
            raise ConflictError(f"Location {clean_code} already exists")
        loc = locations_repo.create_location(db, clean_code, clean_name)
    LOG.info("Location %s (%s) created by %s", loc.code, loc.id, actor.id)
    return loc


def set_location_active(db: Session, actor: Actor, location_id: str, is_active: bool) -> Location:
    policy.require(policy.can_manage_locations(actor))
    with upstream_errors("update location"):
        loc = locations_repo.set_location_active(db, location_id, is_active)
    if loc is None:
        raise NotFound("location")
    LOG.info("Location %s set active=%s by %s", loc.code, is_active, actor.id)
    return loc


# Profiles


def list_profiles(db: Session, actor: Actor, location_id: Optional[str] = None) -> list[UserProfile]:
    """super_admin lists all (optionally one location); admin lists role=user profiles at its location."""
    if actor.is_super_admin:
        policy.require(policy.can_list_profiles(actor, location_id))
        with upstream_errors("list users"):
            return profiles_repo.list_profiles(db, location_id=location_id)
    scope = location_id or actor.location_id
    policy.require(policy.can_list_profiles(actor, scope))
    with upstream_errors("list users"):
        return profiles_repo.list_profiles(db, location_id=scope, role=Role.user.value)


def create_profile(db: Session, actor: Actor, fields: dict[str, Any]) -> UserProfile:
    """
    Create the profile for an identity-provider account. Admins may only create
    role=user at their own location; the location defaults to the admin's.
    """
    role = _parse_role(fields.get("role") or Role.user.value)
    location_id = fields.get("location_id")
    if actor.role is Role.admin and not location_id:
        location_id = actor.location_id
    policy.require(policy.can_create_profile(actor, role, location_id))

    profile_id = _clean_text("id", fields.get("id"))
    email = _clean_text("email", fields.get("email")).lower()
    full_name = _clean_text("full_name", fields.get("full_name"))
    with upstream_errors("create user"):
        location_id = _resolve_location(db, role, location_id)
        if profiles_repo.get_profile(db, profile_id) is not None:
            raise ConflictError("A profile already exists for this account")
        if profiles_repo.get_profile_by_email(db, email) is not None:
            raise ConflictError(f"A profile with email {email} already exists")
        profile = profiles_repo.create_profile(
            db,
            profile_id=profile_id,
            email=email,
            full_name=full_name,
            role=role.value,
            location_id=location_id,
            is_active=bool(fields.get("is_active", True)),
            charging_access=bool(fields.get("charging_access", False)),
            swapping_access=bool(fields.get("swapping_access", False)),
        )
    LOG.info("Profile %s (%s) created by %s", profile.id, profile.role, actor.id)
    return profile


def update_profile(db: Session, actor: Actor, profile_id: str, fields: dict[str, Any]) -> UserProfile:
    """Edit another profile. Only super_admin may change role or location."""
    with upstream_errors("load user"):
        target = profiles_repo.get_profile(db, profile_id)
    if target is None:
        raise NotFound("user_profile")
    target_role = _parse_role(target.role)
    new_role = _parse_role(fields["role"]) if fields.get("role") is not None else None
    new_location_id = fields.get("location_id")
    policy.require(
        policy.can_update_profile(
            actor,
            target_role,
            target.location_id,
            new_role=new_role,
            new_location_id=new_location_id,
        )
    )

    changes: dict[str, Any] = {}
    if fields.get("full_name") is not None:
        changes["full_name"] = _clean_text("full_name", fields["full_name"])
    for flag in _FLAG_FIELDS:
        if fields.get(flag) is not None:
            changes[flag] = bool(fields[flag])

    with upstream_errors("update user"):
        if new_role is not None or new_location_id is not None:
            role = new_role or target_role
            location = new_location_id if new_location_id is not None else target.location_id
            changes["role"] = role.value
            changes["location_id"] = _resolve_location(db, role, location)
        profile = profiles_repo.update_profile(db, profile_id, changes)
    LOG.info("Profile %s updated by %s (%s)", profile_id, actor.id, ", ".join(sorted(changes)) or "no changes")
    return profile


def update_own_profile(db: Session, actor: Actor, full_name: Any) -> UserProfile:
    """Self-service: only the display name."""
    policy.require(policy.can_update_own_profile(actor))
    name = _clean_text("full_name", full_name)
    with upstream_errors("update profile"):
        profile = profiles_repo.update_profile(db, actor.id, {"full_name": name})
    if profile is None:
        raise NotFound("user_profile")
    return profile
