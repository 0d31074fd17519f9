"""Integration tests: equipment directory (listing, code resolution, record maintenance)."""
from datetime import date

import pytest

from repositories.equipment_repository import count_equipment_by_location, get_equipment
from tracker_core import charging
from tracker_core import equipment as equipment_core
from tracker_core.errors import ConflictError, NotFound, PermissionDenied, ValidationError
from tracker_core.identity import actor_from_profile as actor_of

pytestmark = pytest.mark.integration


@pytest.fixture
def user_actor(operator):
    return actor_of(operator)


@pytest.fixture
def admin_actor(admin):
    return actor_of(admin)


def test_list_by_location_scoped(db_session, make_equipment, location, other_location, user_actor):
    make_equipment(location.id, "EQ-001")
    make_equipment(location.id, "EQ-002")
    make_equipment(other_location.id, "EQ-001")
    codes = [e.equipment_code for e in equipment_core.list_by_location(db_session, user_actor, location.id)]
    assert codes == ["EQ-001", "EQ-002"]
    with pytest.raises(PermissionDenied):
        equipment_core.list_by_location(db_session, user_actor, other_location.id)


def test_resolve_by_code_at_location(db_session, make_equipment, location, user_actor):
    eq = make_equipment(location.id, "EQ-001")
    assert equipment_core.resolve_by_code(db_session, user_actor, location.id, " EQ-001 ").id == eq.id


def test_same_code_at_two_locations_is_distinct(db_session, make_equipment, location, other_location, super_admin):
    here = make_equipment(location.id, "EQ-001")
    there = make_equipment(other_location.id, "EQ-001")
    actor = actor_of(super_admin)
    assert equipment_core.resolve_by_code(db_session, actor, location.id, "EQ-001").id == here.id
    assert equipment_core.resolve_by_code(db_session, actor, other_location.id, "EQ-001").id == there.id


def test_non_operational_not_resolvable_for_operators(db_session, make_equipment, location, user_actor):
    make_equipment(location.id, "EQ-005", status="faulty")
    with pytest.raises(NotFound) as exc:
        equipment_core.resolve_by_code(db_session, user_actor, location.id, "EQ-005")
    assert exc.value.message == "Equipment EQ-005 not found or not accessible"
    found = equipment_core.resolve_by_code(db_session, user_actor, location.id, "EQ-005", operational_only=False)
    assert found.status == "faulty"


def test_resolve_blank_code_is_validation_error(db_session, location, user_actor):
    with pytest.raises(ValidationError):
        equipment_core.resolve_by_code(db_session, user_actor, location.id, "  ")


def test_admin_creates_and_updates(db_session, location, admin_actor):
    eq = equipment_core.create(
        db_session,
        admin_actor,
        location.id,
        {"equipment_code": "BT-1", "equipment_type": "Belt Loader", "next_inspection_date": date(2026, 12, 1)},
    )
    assert eq.status == "operational"
    assert eq.created_by == admin_actor.id
    assert count_equipment_by_location(db_session, location.id) == 1

    updated = equipment_core.update(db_session, admin_actor, eq.id, {"status": "maintenance", "notes": "Brake check"})
    assert updated.status == "maintenance"
    assert updated.notes == "Brake check"
    assert updated.updated_by == admin_actor.id


def test_duplicate_code_conflicts(db_session, make_equipment, location, admin_actor):
    make_equipment(location.id, "EQ-001")
    with pytest.raises(ConflictError):
        equipment_core.create(
            db_session, admin_actor, location.id, {"equipment_code": "EQ-001", "equipment_type": "Tug"}
        )


def test_rename_racing_onto_existing_code_conflicts(db_session, make_equipment, location, admin_actor, monkeypatch):
    make_equipment(location.id, "EQ-001")
    eq = make_equipment(location.id, "EQ-002")
    # Another request claims the code between the lookup and the write.
    monkeypatch.setattr(equipment_core.equipment_repo, "get_equipment_by_code", lambda *args: None)
    with pytest.raises(ConflictError):
        equipment_core.update(db_session, admin_actor, eq.id, {"equipment_code": "EQ-001"})
    db_session.expire_all()
    assert get_equipment(db_session, eq.id).equipment_code == "EQ-002"


def test_inspection_dates_ordered(db_session, location, admin_actor):
    with pytest.raises(ValidationError):
        equipment_core.create(
            db_session,
            admin_actor,
            location.id,
            {
                "equipment_code": "EQ-002",
                "equipment_type": "Tug",
                "last_inspection_date": date(2026, 5, 1),
                "next_inspection_date": date(2026, 4, 1),
            },
        )


def test_user_cannot_create_equipment(db_session, location, user_actor):
    with pytest.raises(PermissionDenied):
        equipment_core.create(db_session, user_actor, location.id, {"equipment_code": "X", "equipment_type": "Tug"})


def test_delete_requires_super_admin_and_no_history(db_session, make_equipment, location, admin_actor, super_admin):
    eq = make_equipment(location.id, "EQ-001")
    used = make_equipment(location.id, "EQ-002")
    sa = actor_of(super_admin)
    with pytest.raises(PermissionDenied):
        equipment_core.delete(db_session, admin_actor, eq.id)

    charging.start_charging(db_session, sa, used, "P1", "1")
    with pytest.raises(ConflictError):
        equipment_core.delete(db_session, sa, used.id)

    equipment_core.delete(db_session, sa, eq.id)
    assert get_equipment(db_session, eq.id) is None
