"""API tests: per-equipment change stream over WebSocket."""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from starlette.websockets import WebSocketDisconnect

from db import get_db, get_session_factory
from main import app
from models import Base
from repositories.equipment_repository import create_equipment
from repositories.location_repository import create_location
from repositories.user_profile_repository import create_profile
from tracker_core.identity import issue_token

pytestmark = pytest.mark.api


@pytest.fixture
def eq(make_equipment, location):
    return make_equipment(location.id, "EQ-001")


def test_start_stop_and_swap_are_pushed(client, eq, operator, auth_headers):
    headers = auth_headers(operator)
    with client.websocket_connect(f"/api/equipment/{eq.id}/events?token={issue_token(operator.id)}") as ws:
        started = client.post(
            f"/api/equipment/{eq.id}/charging/start",
            json={"charging_point_id": "P1", "meter_reading": "1000"},
            headers=headers,
        ).json()
        assert ws.receive_json() == {
            "table": "charging_session",
            "event": "insert",
            "row_id": started["id"],
            "equipment_id": eq.id,
        }
        client.post(f"/api/charging-sessions/{started['id']}/stop", headers=headers)
        assert ws.receive_json()["event"] == "update"
        client.post(f"/api/equipment/{eq.id}/swaps", json={"meter_reading": "5"}, headers=headers)
        assert ws.receive_json()["table"] == "swap_event"


def test_stream_refused_without_token(client, eq):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/api/equipment/{eq.id}/events") as ws:
            ws.receive_json()


def test_stream_refused_for_other_location(client, make_equipment, other_location, operator):
    foreign = make_equipment(other_location.id, "EQ-001")
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/api/equipment/{foreign.id}/events?token={issue_token(operator.id)}") as ws:
            ws.receive_json()


@pytest.fixture
def single_connection_engine(engine, tmp_path):
    """File-backed database whose pool holds exactly one connection."""
    eng = create_engine(
        f"sqlite:///{tmp_path / 'test_events.db'}",
        connect_args={"check_same_thread": False},
        pool_size=1,
        max_overflow=0,
        pool_timeout=2,
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


def test_open_stream_holds_no_database_connection(single_connection_engine):
    factory = sessionmaker(bind=single_connection_engine, autocommit=False, autoflush=False)
    with Session(single_connection_engine) as s:
        loc = create_location(s, "EVT", "Events")
        eq = create_equipment(s, location_id=loc.id, equipment_code="EQ-001", equipment_type="Tug")
        profile = create_profile(
            s,
            profile_id=str(uuid.uuid4()),
            email="stream@example.com",
            full_name="Stream Operator",
            role="user",
            location_id=loc.id,
            charging_access=True,
        )
        eq_id, profile_id = eq.id, profile.id

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: factory
    try:
        with TestClient(app) as c:
            token = issue_token(profile_id)
            with c.websocket_connect(f"/api/equipment/{eq_id}/events?token={token}"):
                assert single_connection_engine.pool.checkedout() == 0
                r = c.get("/api/me", headers={"Authorization": f"Bearer {token}"})
                assert r.status_code == 200
                assert r.json()["id"] == profile_id
    finally:
        app.dependency_overrides.clear()
