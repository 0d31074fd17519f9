# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"

import uuid
from contextlib import nullcontext

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from db import SessionLocal, get_db, get_session_factory
from main import _seed_locations_if_empty, app
from models import Base
from models.charging_point import ChargingPoint  # noqa: F401 - register with Base
from models.charging_session import ChargingSession  # noqa: F401
from models.equipment import Equipment  # noqa: F401
from models.location import Location  # noqa: F401
from models.swap_event import SwapEvent  # noqa: F401
from models.user_profile import UserProfile  # noqa: F401
from repositories.equipment_repository import create_equipment
from repositories.location_repository import create_location
from repositories.user_profile_repository import create_profile
from tracker_core import notifications
from tracker_core.identity import issue_token


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    Base.metadata.create_all(eng)
    # Seed now so app startup never commits inside a test transaction.
    _seed_locations_if_empty()
    return eng


@pytest.fixture
def db_session(engine):
    """Function-scoped session; each test runs in a transaction that is rolled back."""
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection)
    session.begin_nested()
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    app.dependency_overrides[get_session_factory] = lambda: (lambda: nullcontext(db_session))
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _clear_change_feed():
    """Observers never leak between tests."""
    yield
    notifications.feed.clear()


def unique_code(prefix: str = "T") -> str:
    """Short unique code; seeded rows and earlier tests may share the database."""
    return f"{prefix}{uuid.uuid4().hex[:8].upper()}"


@pytest.fixture
def make_location(db_session):
    """Factory: create a location with a unique code."""
    def _make(name: str = "Test Airport") -> Location:
        return create_location(db_session, unique_code("L"), name)
    return _make


@pytest.fixture
def location(make_location):
    return make_location()


@pytest.fixture
def other_location(make_location):
    return make_location("Other Airport")


@pytest.fixture
def make_profile(db_session):
    """Factory: create a profile. super_admin gets no location."""
    def _make(
        role: str = "user",
        location_id: str | None = None,
        *,
        is_active: bool = True,
        charging_access: bool = False,
        swapping_access: bool = False,
        full_name: str = "Test Operator",
    ) -> UserProfile:
        profile_id = str(uuid.uuid4())
        return create_profile(
            db_session,
            profile_id=profile_id,
            email=f"{profile_id[:8]}@example.com",
            full_name=full_name,
            role=role,
            location_id=None if role == "super_admin" else location_id,
            is_active=is_active,
            charging_access=charging_access,
            swapping_access=swapping_access,
        )
    return _make


@pytest.fixture
def make_equipment(db_session):
    """Factory: create an equipment record at a location."""
    def _make(location_id: str, code: str = "EQ-001", status: str = "operational") -> Equipment:
        return create_equipment(
            db_session,
            location_id=location_id,
            equipment_code=code,
            equipment_type="Baggage Tractor",
            status=status,
            last_inspection_date=None,
            next_inspection_date=None,
            notes="",
            created_by=None,
        )
    return _make


@pytest.fixture
def operator(make_profile, location):
    """role=user at location with both access flags."""
    return make_profile("user", location.id, charging_access=True, swapping_access=True)


@pytest.fixture
def admin(make_profile, location):
    return make_profile("admin", location.id, charging_access=True, swapping_access=True)


@pytest.fixture
def super_admin(make_profile):
    return make_profile("super_admin", charging_access=True, swapping_access=True)


@pytest.fixture
def auth_headers():
    """Factory: bearer header for a profile, as the identity provider would issue it."""
    def _headers(profile) -> dict:
        return {"Authorization": f"Bearer {issue_token(profile.id)}"}
    return _headers
