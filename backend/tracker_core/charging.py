"""Charging session controller.

Per equipment unit there are two derived states: idle (no open session) and
charging (exactly one row with end_time NULL). The open row is the state token.
The database enforces "at most one open row per equipment" with a partial
unique index; the open-session check in ``start_charging`` runs at call time so
a stale client view gets a clean conflict instead of an IntegrityError.
"""
import logging
import math
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.charging_session import ChargingSession
from models.equipment import Equipment
from repositories import charging_session_repository as sessions_repo
from tracker_core import access_policy as policy
from tracker_core import notifications
from tracker_core.errors import (
    MSG_ALREADY_CHARGING,
    MSG_ALREADY_CLOSED,
    MSG_CHARGING_POINT_REQUIRED,
    ConflictError,
    NotFound,
    UpstreamError,
    ValidationError,
    upstream_errors,
)
from tracker_core.identity import Actor
from tracker_core.meter import parse_meter_reading
from tracker_core.roles import EquipmentStatus
from utils.clock import as_utc, utcnow
from utils.config import RECENT_SESSIONS_LIMIT

LOG = logging.getLogger(__name__)

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


def duration_minutes(row: ChargingSession, now: Optional[datetime] = None) -> Optional[int]:
    """Whole minutes between start and end (or now, for an open session when now is given)."""
    start = as_utc(row.start_time)
    end = as_utc(row.end_time) or now
    if start is None or end is None:
        return None
    return max(0, math.floor((end - start).total_seconds() / 60))


def get_open_session(db: Session, equipment_id: str) -> Optional[ChargingSession]:
    """The equipment's open session, or None when idle."""
    with upstream_errors("load open charging session"):
        return sessions_repo.get_open_session(db, equipment_id)


def list_recent(db: Session, equipment_id: str, limit: int = RECENT_SESSIONS_LIMIT) -> list[ChargingSession]:
    """Operator-facing history, newest start first."""
    if limit < 1:
        raise ValidationError("limit", "Limit must be at least 1")
    with upstream_errors("load charging history"):
        return sessions_repo.list_recent_sessions(db, equipment_id, limit)


def start_charging(
    db: Session,
    actor: Actor,
    equipment: Equipment,
    charging_point_id: Optional[str],
    meter_reading,
) -> ChargingSession:
    """
    Open a charging session on equipment. Checks, in order: access policy,
    charging point present, meter reading valid, equipment operational, no open
    session. Returns the committed row.
    """
    policy.require(policy.can_start_charging(actor, equipment.location_id))
    point_id = (charging_point_id or "").strip()
    if not point_id:
        raise ValidationError("charging_point_id", MSG_CHARGING_POINT_REQUIRED)
    reading = parse_meter_reading(meter_reading)
    if equipment.status != EquipmentStatus.operational.value:
        raise ConflictError(f"Equipment {equipment.equipment_code} is {equipment.status} and cannot be charged")

    with upstream_errors("start charging"):
        if sessions_repo.get_open_session(db, equipment.id) is not None:
            LOG.warning("Start refused for %s: session already open", equipment.equipment_code)
            raise ConflictError(MSG_ALREADY_CHARGING)
        try:
            row = sessions_repo.insert_open_session(
                db,
                equipment_id=equipment.id,
                user_id=actor.id,
                location_id=equipment.location_id,
                charging_point_id=point_id,
                meter_reading_at_start=reading,
                start_time=utcnow(),
            )
        except IntegrityError as e:
            # Lost the race to a concurrent start, or some other constraint failed.
            if sessions_repo.get_open_session(db, equipment.id) is not None:
                LOG.warning("Start refused for %s: concurrent session won", equipment.equipment_code)
                raise ConflictError(MSG_ALREADY_CHARGING) from e
            LOG.exception("Unexpected constraint failure starting charge on %s", equipment.equipment_code)
            raise UpstreamError("Storage rejected the charging session", e) from e
        db.commit()
        db.refresh(row)

    LOG.info(
        "Charging started on %s (session %s, point %s, meter %s) by %s",
        equipment.equipment_code,
        row.id,
        point_id,
        reading,
        actor.id,
    )
    notifications.publish(notifications.TABLE_CHARGING_SESSION, "insert", row.id, equipment.id)
    return row


def stop_charging(db: Session, actor: Actor, session_id: str) -> ChargingSession:
    """
    Seal one session by id. Only the row that is still open is updated, so a
    second stop (or a stop racing another) gets ConflictError and end_time stays put.
    """
    with upstream_errors("load charging session"):
        row = sessions_repo.get_session(db, session_id)
    if row is None:
        raise NotFound("charging_session")
    policy.require(policy.can_stop_charging(actor, row.location_id))
    if row.end_time is not None:
        raise ConflictError(MSG_ALREADY_CLOSED)

    with upstream_errors("stop charging"):
        if not sessions_repo.seal_session(db, session_id, utcnow()):
            LOG.warning("Stop refused for session %s: already closed", session_id)
            raise ConflictError(MSG_ALREADY_CLOSED)
        db.refresh(row)
        row.duration_minutes = duration_minutes(row)
        db.commit()
        db.refresh(row)

    LOG.info(
        "Charging stopped for equipment %s (session %s, %s min) by %s",
        row.equipment_id,
        row.id,
        row.duration_minutes,
        actor.id,
    )
    notifications.publish(notifications.TABLE_CHARGING_SESSION, "update", row.id, row.equipment_id)
    return row


def list_records(
    db: Session,
    actor: Actor,
    *,
    location_id: Optional[str] = None,
    status: Optional[str] = None,
) -> list[ChargingSession]:
    """Charging records report. admin and user are always scoped to their own location."""
    if status not in (None, STATUS_ACTIVE, STATUS_COMPLETED):
        raise ValidationError("status", "Status must be 'active' or 'completed'")
    scope = policy.scoped_location(actor, location_id)
    active = {STATUS_ACTIVE: True, STATUS_COMPLETED: False}.get(status)
    with upstream_errors("list charging records"):
        return sessions_repo.list_sessions(db, location_id=scope, active=active)
