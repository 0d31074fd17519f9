"""Unit tests: token verification and profile-to-actor mapping."""
from datetime import timedelta

import pytest

from models.user_profile import UserProfile
from tracker_core.identity import InvalidCredentials, actor_from_profile, decode_subject, issue_token
from tracker_core.roles import Role

pytestmark = pytest.mark.unit


def _profile(role="user", location_id="loc-1", **flags) -> UserProfile:
    return UserProfile(
        id="user-1",
        email="op@example.com",
        full_name="Operator",
        role=role,
        location_id=location_id,
        is_active=flags.get("is_active", True),
        charging_access=flags.get("charging_access", True),
        swapping_access=flags.get("swapping_access", False),
    )


def test_issued_token_round_trips_subject():
    assert decode_subject(issue_token("user-1")) == "user-1"


def test_expired_token_rejected():
    token = issue_token("user-1", expires_delta=timedelta(seconds=-30))
    with pytest.raises(InvalidCredentials):
        decode_subject(token)


def test_wrong_audience_rejected():
    with pytest.raises(InvalidCredentials):
        decode_subject(issue_token("user-1", aud="someone-else"))


def test_garbage_token_rejected():
    with pytest.raises(InvalidCredentials):
        decode_subject("not-a-jwt")


def test_actor_from_profile_maps_fields():
    actor = actor_from_profile(_profile())
    assert actor.id == "user-1"
    assert actor.role is Role.user
    assert actor.location_id == "loc-1"
    assert actor.charging_access is True
    assert actor.swapping_access is False
    assert not actor.is_super_admin


def test_actor_from_profile_rejects_unknown_role():
    with pytest.raises(InvalidCredentials):
        actor_from_profile(_profile(role="operator"))


def test_actor_from_profile_enforces_role_location_rule():
    with pytest.raises(InvalidCredentials):
        actor_from_profile(_profile(role="admin", location_id=None))
    with pytest.raises(InvalidCredentials):
        actor_from_profile(_profile(role="super_admin", location_id="loc-1"))
    assert actor_from_profile(_profile(role="super_admin", location_id=None)).is_super_admin
