"""Access policy: pure predicates consulted before every mutating or sensitive read.

Every check returns ``None`` when allowed or a ``PermissionDenied`` naming the
violated rule. Nothing here touches the database; callers pass in the actor and
the ``location_id``/``role`` of the target. ``require`` raises the first denial.

Precedence: inactive actor, then location scoping, then the operation's own
role or capability rule.
"""
import logging
from typing import Optional

from tracker_core.errors import PermissionDenied
from tracker_core.identity import Actor
from tracker_core.roles import Role

LOG = logging.getLogger(__name__)

RULE_INACTIVE = "inactive_profile"
RULE_LOCATION = "location_scope"
RULE_LOCATION_ADMIN = "location_admin"
RULE_PROFILE_ADMIN = "profile_admin"
RULE_ROLE_MUTATION = "role_mutation"
RULE_EQUIPMENT_WRITE = "equipment_write"
RULE_EQUIPMENT_DELETE = "equipment_delete"
RULE_CHARGING_POINT_WRITE = "charging_point_write"
RULE_CHARGING_POINT_DELETE = "charging_point_delete"
RULE_CHARGING_ACCESS = "charging_access"
RULE_SWAPPING_ACCESS = "swapping_access"

Decision = Optional[PermissionDenied]


def require(*decisions: Decision) -> None:
    """Raise the first denial, if any."""
    for decision in decisions:
        if decision is not None:
            LOG.warning("Permission denied (%s): %s", decision.rule, decision.message)
            raise decision


def check_active(actor: Actor) -> Decision:
    """Inactive profiles may do nothing but read their own profile."""
    if not actor.is_active:
        return PermissionDenied(RULE_INACTIVE, "Your account is disabled")
    return None


def check_location(actor: Actor, location_id: Optional[str]) -> Decision:
    """super_admin passes; admin and user only act within their own location."""
    if actor.is_super_admin:
        return None
    if location_id is None or actor.location_id != location_id:
        return PermissionDenied(RULE_LOCATION, "You do not have access to this location")
    return None


def _first(*decisions: Decision) -> Decision:
    for decision in decisions:
        if decision is not None:
            return decision
    return None


def can_read_location(actor: Actor, location_id: Optional[str]) -> Decision:
    """Reads of location-scoped data (equipment, sessions, swaps, charging points)."""
    return _first(check_active(actor), check_location(actor, location_id))


def scoped_location(actor: Actor, location_id: Optional[str]) -> Optional[str]:
    """
    Location filter for list reports. super_admin may pass None (all locations);
    everyone else defaults to, and is held to, their own location.
    """
    if actor.is_super_admin:
        require(check_active(actor))
        return location_id
    scope = location_id or actor.location_id
    require(can_read_location(actor, scope))
    return scope


def can_update_own_profile(actor: Actor) -> Decision:
    """Self-service edits (name only) need an active profile."""
    return check_active(actor)


def can_manage_locations(actor: Actor) -> Decision:
    """Creating locations and toggling is_active."""
    if decision := check_active(actor):
        return decision
    if not actor.is_super_admin:
        return PermissionDenied(RULE_LOCATION_ADMIN, "Only a super admin can manage locations")
    return None


def can_list_profiles(actor: Actor, location_id: Optional[str]) -> Decision:
    """super_admin lists any profiles; admin lists users at its own location."""
    if decision := check_active(actor):
        return decision
    if decision := check_location(actor, location_id):
        return decision
    if actor.role is Role.user:
        return PermissionDenied(RULE_PROFILE_ADMIN, "Only admins can manage users")
    return None


def can_create_profile(actor: Actor, role: Role, location_id: Optional[str]) -> Decision:
    """super_admin creates any profile; admin creates role=user profiles at its own location."""
    if decision := check_active(actor):
        return decision
    if actor.is_super_admin:
        return None
    if decision := check_location(actor, location_id):
        return decision
    if actor.role is not Role.admin:
        return PermissionDenied(RULE_PROFILE_ADMIN, "Only admins can manage users")
    if role is not Role.user:
        return PermissionDenied(RULE_ROLE_MUTATION, "Admins can only create user accounts")
    return None


def can_update_profile(
    actor: Actor,
    target_role: Role,
    target_location_id: Optional[str],
    *,
    new_role: Optional[Role] = None,
    new_location_id: Optional[str] = None,
) -> Decision:
    """
    super_admin edits anything, including role and location.
    admin edits role=user profiles at its own location and may not change their role or location.
    """
    if decision := check_active(actor):
        return decision
    if actor.is_super_admin:
        return None
    if decision := check_location(actor, target_location_id):
        return decision
    if actor.role is not Role.admin:
        return PermissionDenied(RULE_PROFILE_ADMIN, "Only admins can manage users")
    if target_role is not Role.user:
        return PermissionDenied(RULE_ROLE_MUTATION, "Admins can only edit user accounts")
    if new_role is not None and new_role is not target_role:
        return PermissionDenied(RULE_ROLE_MUTATION, "Only a super admin can change roles")
    if new_location_id is not None and new_location_id != target_location_id:
        return PermissionDenied(RULE_ROLE_MUTATION, "Only a super admin can change a user's location")
    return None


def can_write_equipment(actor: Actor, location_id: Optional[str]) -> Decision:
    """Create or update an equipment record."""
    if decision := check_active(actor):
        return decision
    if decision := check_location(actor, location_id):
        return decision
    if actor.role is Role.user:
        return PermissionDenied(RULE_EQUIPMENT_WRITE, "You cannot modify equipment records")
    return None


def can_delete_equipment(actor: Actor, location_id: Optional[str]) -> Decision:
    if decision := check_active(actor):
        return decision
    if not actor.is_super_admin:
        return PermissionDenied(RULE_EQUIPMENT_DELETE, "Only a super admin can delete equipment")
    return None


def can_write_charging_point(actor: Actor, location_id: Optional[str]) -> Decision:
    """Create or rename a charging point: admin at its own location, or super_admin."""
    if decision := check_active(actor):
        return decision
    if decision := check_location(actor, location_id):
        return decision
    if actor.role is Role.user:
        return PermissionDenied(RULE_CHARGING_POINT_WRITE, "Only admins can manage charging points")
    return None


def can_delete_charging_point(actor: Actor, location_id: Optional[str]) -> Decision:
    if decision := can_write_charging_point(actor, location_id):
        return decision
    if not actor.is_super_admin:
        return PermissionDenied(RULE_CHARGING_POINT_DELETE, "Only a super admin can delete charging points")
    return None


def can_start_charging(actor: Actor, location_id: Optional[str]) -> Decision:
    """Start needs the charging access flag and a location match."""
    if decision := check_active(actor):
        return decision
    if decision := check_location(actor, location_id):
        return decision
    if not actor.charging_access:
        return PermissionDenied(RULE_CHARGING_ACCESS, "You do not have permission to start charging")
    return None


def can_stop_charging(actor: Actor, location_id: Optional[str]) -> Decision:
    """Stop needs a location match and either the charging flag or an admin role."""
    if decision := check_active(actor):
        return decision
    if decision := check_location(actor, location_id):
        return decision
    if not actor.charging_access and actor.role is Role.user:
        return PermissionDenied(RULE_CHARGING_ACCESS, "You do not have permission to stop charging")
    return None


def can_record_swap(actor: Actor, location_id: Optional[str]) -> Decision:
    """Swap recording needs the swapping access flag and a location match."""
    if decision := check_active(actor):
        return decision
    if decision := check_location(actor, location_id):
        return decision
    if not actor.swapping_access:
        return PermissionDenied(RULE_SWAPPING_ACCESS, "You do not have permission to record battery swaps")
    return None
