"""API tests: equipment directory endpoints."""
import pytest

pytestmark = pytest.mark.api


def test_admin_creates_lists_and_updates(client, admin, location, auth_headers):
    headers = auth_headers(admin)
    r = client.post(
        f"/api/locations/{location.id}/equipment",
        json={"equipment_code": "EQ-001", "equipment_type": "Baggage Tractor", "next_inspection_date": "2026-12-01"},
        headers=headers,
    )
    assert r.status_code == 201
    created = r.json()
    assert created["status"] == "operational"
    assert created["created_by"] == admin.id
    assert created["next_inspection_date"] == "2026-12-01"

    r = client.get(f"/api/locations/{location.id}/equipment", headers=headers)
    assert [e["id"] for e in r.json()] == [created["id"]]

    r = client.patch(f"/api/equipment/{created['id']}", json={"status": "maintenance"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "maintenance"
    assert r.json()["updated_by"] == admin.id


def test_duplicate_code_409(client, admin, location, make_equipment, auth_headers):
    make_equipment(location.id, "EQ-001")
    r = client.post(
        f"/api/locations/{location.id}/equipment",
        json={"equipment_code": "EQ-001", "equipment_type": "Tug"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 409


def test_user_cannot_create_equipment(client, operator, location, auth_headers):
    r = client.post(
        f"/api/locations/{location.id}/equipment",
        json={"equipment_code": "EQ-002", "equipment_type": "Tug"},
        headers=auth_headers(operator),
    )
    assert r.status_code == 403
    assert r.json()["rule"] == "equipment_write"


def test_resolve_by_code(client, operator, location, make_equipment, auth_headers):
    eq = make_equipment(location.id, "EQ-001")
    make_equipment(location.id, "EQ-002", status="faulty")
    headers = auth_headers(operator)
    r = client.get(f"/api/locations/{location.id}/equipment/resolve?code=EQ-001", headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == eq.id
    r = client.get(f"/api/locations/{location.id}/equipment/resolve?code=EQ-002", headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Equipment EQ-002 not found or not accessible"
    r = client.get(
        f"/api/locations/{location.id}/equipment/resolve?code=EQ-002&operational_only=false", headers=headers
    )
    assert r.status_code == 200


def test_super_admin_deletes_unused_equipment(client, super_admin, admin, location, make_equipment, auth_headers):
    eq = make_equipment(location.id, "EQ-001")
    assert client.delete(f"/api/equipment/{eq.id}", headers=auth_headers(admin)).status_code == 403
    assert client.delete(f"/api/equipment/{eq.id}", headers=auth_headers(super_admin)).status_code == 204
    assert client.get(f"/api/equipment/{eq.id}", headers=auth_headers(super_admin)).status_code == 404


def test_charging_points_crud(client, admin, super_admin, operator, location, auth_headers):
    r = client.post(f"/api/locations/{location.id}/charging-points", json={"name": "Bay 1"}, headers=auth_headers(admin))
    assert r.status_code == 201
    point_id = r.json()["id"]
    r = client.get(f"/api/locations/{location.id}/charging-points", headers=auth_headers(operator))
    assert [p["name"] for p in r.json()] == ["Bay 1"]
    r = client.patch(f"/api/charging-points/{point_id}", json={"name": "Bay 2"}, headers=auth_headers(admin))
    assert r.json()["name"] == "Bay 2"
    assert client.delete(f"/api/charging-points/{point_id}", headers=auth_headers(admin)).status_code == 403
    assert client.delete(f"/api/charging-points/{point_id}", headers=auth_headers(super_admin)).status_code == 204
