"""Integration tests: location and profile administration."""
import uuid

import pytest

from tracker_core import profiles
from tracker_core.errors import ConflictError, NotFound, PermissionDenied, ValidationError
from tracker_core.identity import actor_from_profile as actor_of

pytestmark = pytest.mark.integration


def _new_account(**overrides) -> dict:
    account_id = str(uuid.uuid4())
    return {"id": account_id, "email": f"{account_id[:8]}@Example.com", "full_name": "New Operator", **overrides}


def test_super_admin_creates_location_with_uppercase_code(db_session, super_admin):
    code = f"x{uuid.uuid4().hex[:6]}"
    loc = profiles.create_location(db_session, actor_of(super_admin), code, "New Airport")
    assert loc.code == code.upper()
    assert loc.is_active is True
    with pytest.raises(ConflictError):
        profiles.create_location(db_session, actor_of(super_admin), code, "Again")


def test_admin_cannot_manage_locations(db_session, admin, location):
    with pytest.raises(PermissionDenied):
        profiles.create_location(db_session, actor_of(admin), "ZZZ", "Nope")
    with pytest.raises(PermissionDenied):
        profiles.set_location_active(db_session, actor_of(admin), location.id, False)


def test_location_visibility(db_session, admin, super_admin, location, other_location):
    assert [loc.id for loc in profiles.list_visible_locations(db_session, actor_of(admin))] == [location.id]
    visible = {loc.id for loc in profiles.list_visible_locations(db_session, actor_of(super_admin))}
    assert {location.id, other_location.id} <= visible


def test_deactivate_location(db_session, super_admin, location):
    assert profiles.set_location_active(db_session, actor_of(super_admin), location.id, False).is_active is False
    with pytest.raises(NotFound):
        profiles.set_location_active(db_session, actor_of(super_admin), "missing", True)


def test_admin_creates_user_at_own_location(db_session, admin, location):
    profile = profiles.create_profile(db_session, actor_of(admin), _new_account(charging_access=True))
    assert profile.role == "user"
    assert profile.location_id == location.id
    assert profile.charging_access is True
    assert profile.email.endswith("@example.com")


def test_admin_cannot_create_admin_or_elsewhere(db_session, admin, other_location):
    with pytest.raises(PermissionDenied):
        profiles.create_profile(db_session, actor_of(admin), _new_account(role="admin"))
    with pytest.raises(PermissionDenied):
        profiles.create_profile(db_session, actor_of(admin), _new_account(location_id=other_location.id))


def test_super_admin_profile_has_no_location(db_session, super_admin, location):
    created = profiles.create_profile(
        db_session, actor_of(super_admin), _new_account(role="super_admin", location_id=location.id)
    )
    assert created.location_id is None
    with pytest.raises(ValidationError):
        profiles.create_profile(db_session, actor_of(super_admin), _new_account(role="admin"))


def test_duplicate_account_conflicts(db_session, super_admin, location):
    account = _new_account(location_id=location.id)
    profiles.create_profile(db_session, actor_of(super_admin), account)
    with pytest.raises(ConflictError):
        profiles.create_profile(db_session, actor_of(super_admin), account)


def test_admin_toggles_flags_but_not_role(db_session, admin, make_profile, location):
    target = make_profile("user", location.id)
    updated = profiles.update_profile(db_session, actor_of(admin), target.id, {"swapping_access": True})
    assert updated.swapping_access is True
    with pytest.raises(PermissionDenied):
        profiles.update_profile(db_session, actor_of(admin), target.id, {"role": "admin"})


def test_super_admin_promotes_and_moves(db_session, super_admin, make_profile, location, other_location):
    target = make_profile("user", location.id)
    updated = profiles.update_profile(
        db_session, actor_of(super_admin), target.id, {"role": "admin", "location_id": other_location.id}
    )
    assert updated.role == "admin"
    assert updated.location_id == other_location.id


def test_deactivated_profile_is_denied_everywhere(db_session, super_admin, make_profile, location):
    target = make_profile("user", location.id, charging_access=True)
    profiles.update_profile(db_session, actor_of(super_admin), target.id, {"is_active": False})
    inactive = actor_of(target)
    assert inactive.is_active is False
    with pytest.raises(PermissionDenied) as exc:
        profiles.update_own_profile(db_session, inactive, "New Name")
    assert exc.value.rule == "inactive_profile"


def test_update_own_name(db_session, operator):
    assert profiles.update_own_profile(db_session, actor_of(operator), "  Renamed ").full_name == "Renamed"
    with pytest.raises(ValidationError):
        profiles.update_own_profile(db_session, actor_of(operator), " ")
