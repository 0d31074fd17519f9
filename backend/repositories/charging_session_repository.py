"""Charging session ledger: open-session lookup, history, insert, seal."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from models.charging_session import ChargingSession


def get_session(session: Session, session_id: str) -> Optional[ChargingSession]:
    """Return a charging session by id or None."""
    return session.get(ChargingSession, session_id)


def get_open_session(session: Session, equipment_id: str) -> Optional[ChargingSession]:
    """Return the open session (end_time NULL) for an equipment unit, newest first if ever more than one."""
    return session.execute(
        select(ChargingSession)
        .where(
            ChargingSession.equipment_id == equipment_id,
            ChargingSession.end_time.is_(None),
        )
        .order_by(ChargingSession.start_time.desc())
        .limit(1)
    ).scalar_one_or_none()


def list_recent_sessions(session: Session, equipment_id: str, limit: int = 5) -> list[ChargingSession]:
    """Return the most recent sessions for an equipment unit, newest start_time first."""
    result = session.execute(
        select(ChargingSession)
        .where(ChargingSession.equipment_id == equipment_id)
        .order_by(ChargingSession.start_time.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def list_sessions(
    session: Session,
    *,
    location_id: Optional[str] = None,
    active: Optional[bool] = None,
) -> list[ChargingSession]:
    """Return sessions newest first; active=True only open ones, active=False only sealed ones."""
    query = select(ChargingSession).order_by(ChargingSession.start_time.desc())
    if location_id is not None:
        query = query.where(ChargingSession.location_id == location_id)
    if active is True:
        query = query.where(ChargingSession.end_time.is_(None))
    elif active is False:
        query = query.where(ChargingSession.end_time.is_not(None))
    result = session.execute(query)
    return list(result.scalars().all())


def count_sessions_for_equipment(session: Session, equipment_id: str) -> int:
    """Return the number of sessions ever recorded for an equipment unit."""
    result = session.execute(
        select(func.count()).select_from(ChargingSession).where(ChargingSession.equipment_id == equipment_id)
    )
    return result.scalar() or 0


def insert_open_session(
    session: Session,
    *,
    equipment_id: str,
    user_id: str,
    location_id: str,
    charging_point_id: str,
    meter_reading_at_start: Decimal,
    start_time: datetime,
) -> ChargingSession:
    """
    Insert an open session inside a savepoint and flush it. Does not commit.
    Raises IntegrityError (savepoint rolled back) when the open-session unique index rejects it.
    """
    row = ChargingSession(
        equipment_id=equipment_id,
        user_id=user_id,
        location_id=location_id,
        charging_point_id=charging_point_id,
        meter_reading_at_start=meter_reading_at_start,
        start_time=start_time,
        end_time=None,
    )
    with session.begin_nested():
        session.add(row)
    return row


def seal_session(session: Session, session_id: str, end_time: datetime) -> bool:
    """
    Set end_time on one session only if it is still open. Does not commit.
    Returns True if this call sealed it, False if it was already closed or missing.
    """
    result = session.execute(
        update(ChargingSession)
        .where(
            ChargingSession.id == session_id,
            ChargingSession.end_time.is_(None),
        )
        .values(end_time=end_time, updated_at=end_time)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
