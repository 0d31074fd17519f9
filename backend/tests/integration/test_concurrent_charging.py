"""Integration tests: concurrent start/stop on one equipment unit, file-backed SQLite, one session per thread."""
import threading
import uuid

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.orm import Session

from db import build_engine
from models import Base
from models.charging_session import ChargingSession
from repositories.equipment_repository import create_equipment, get_equipment
from repositories.location_repository import create_location
from repositories.user_profile_repository import create_profile
from tracker_core import charging
from tracker_core.errors import ConflictError
from tracker_core.identity import actor_from_profile

pytestmark = pytest.mark.integration

WORKERS = 8


@pytest.fixture
def file_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test_concurrency.db'}")

    # pysqlite defers BEGIN until the first write; take the write lock up front so
    # concurrent transactions queue on the busy timeout instead of deadlocking.
    @event.listens_for(engine, "connect")
    def _autocommit_driver(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def seeded(file_engine):
    """One location, one equipment unit and WORKERS operators with charging access."""
    with Session(file_engine) as s:
        loc = create_location(s, "CCY", "Concurrency")
        eq = create_equipment(
            s,
            location_id=loc.id,
            equipment_code="EQ-001",
            equipment_type="Tug",
            status="operational",
            last_inspection_date=None,
            next_inspection_date=None,
            notes="",
            created_by=None,
        )
        actors = []
        for i in range(WORKERS):
            profile = create_profile(
                s,
                profile_id=str(uuid.uuid4()),
                email=f"op{i}@example.com",
                full_name=f"Operator {i}",
                role="user",
                location_id=loc.id,
                charging_access=True,
            )
            actors.append(actor_from_profile(profile))
        return eq.id, actors


def _run_concurrently(target, count):
    barrier = threading.Barrier(count)
    outcomes: list = []
    lock = threading.Lock()

    def worker(i):
        barrier.wait()
        try:
            result = target(i)
        except Exception as e:
            result = e
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return outcomes


def _open_rows(engine, equipment_id) -> int:
    with Session(engine) as s:
        return s.execute(
            select(func.count())
            .select_from(ChargingSession)
            .where(ChargingSession.equipment_id == equipment_id, ChargingSession.end_time.is_(None))
        ).scalar()


def test_concurrent_starts_open_exactly_one_session(file_engine, seeded):
    equipment_id, actors = seeded

    def start(i):
        with Session(file_engine) as s:
            equipment = get_equipment(s, equipment_id)
            return charging.start_charging(s, actors[i], equipment, "P1", str(1000 + i)).id

    outcomes = _run_concurrently(start, WORKERS)
    successes = [o for o in outcomes if isinstance(o, str)]
    conflicts = [o for o in outcomes if isinstance(o, ConflictError)]
    assert len(outcomes) == WORKERS
    assert len(successes) == 1, outcomes
    assert len(conflicts) == WORKERS - 1, outcomes
    assert _open_rows(file_engine, equipment_id) == 1


def test_concurrent_stops_seal_once(file_engine, seeded):
    equipment_id, actors = seeded
    with Session(file_engine) as s:
        session_id = charging.start_charging(s, actors[0], get_equipment(s, equipment_id), "P1", "1000").id

    def stop(i):
        with Session(file_engine) as s:
            return charging.stop_charging(s, actors[i], session_id).end_time

    outcomes = _run_concurrently(stop, WORKERS)
    sealed = [o for o in outcomes if not isinstance(o, Exception)]
    conflicts = [o for o in outcomes if isinstance(o, ConflictError)]
    assert len(sealed) == 1, outcomes
    assert len(conflicts) == WORKERS - 1, outcomes
    with Session(file_engine) as s:
        assert s.get(ChargingSession, session_id).end_time == sealed[0]
    assert _open_rows(file_engine, equipment_id) == 0
