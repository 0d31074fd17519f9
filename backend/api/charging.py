"""Charging session API routes and the per-equipment change stream."""
import asyncio
import contextlib
import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from api.deps import get_current_actor, profile_for_token
from db import get_db, get_session_factory
from schemas.charging import ChargingSessionResponse, StartChargingRequest
from tracker_core import charging
from tracker_core import equipment as equipment_core
from tracker_core import notifications
from tracker_core.errors import TrackerError
from tracker_core.identity import Actor, InvalidCredentials, actor_from_profile
from utils.clock import utcnow
from utils.config import RECENT_SESSIONS_LIMIT

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["charging"])


def _decimal_str(value) -> Optional[str]:
    return None if value is None else f"{value:.2f}"


def _session_to_response(row) -> ChargingSessionResponse:
    """Build ChargingSessionResponse; open sessions report their running duration."""
    is_open = row.end_time is None
    return ChargingSessionResponse(
        id=row.id,
        equipment_id=row.equipment_id,
        user_id=row.user_id,
        location_id=row.location_id,
        charging_point_id=row.charging_point_id,
        meter_reading_at_start=_decimal_str(row.meter_reading_at_start),
        start_time=row.start_time,
        end_time=row.end_time,
        duration_minutes=charging.duration_minutes(row, utcnow()) if is_open else row.duration_minutes,
        is_open=is_open,
    )


@router.get("/equipment/{equipment_id}/charging/open", response_model=Optional[ChargingSessionResponse])
def get_open_session(
    equipment_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Optional[ChargingSessionResponse]:
    """The equipment's open session, or null when idle."""
    equipment = equipment_core.get_for_actor(db, actor, equipment_id)
    row = charging.get_open_session(db, equipment.id)
    return _session_to_response(row) if row is not None else None


@router.get("/equipment/{equipment_id}/charging/recent", response_model=list[ChargingSessionResponse])
def list_recent_sessions(
    equipment_id: str,
    limit: int = Query(RECENT_SESSIONS_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ChargingSessionResponse]:
    """Most recent sessions for the equipment, newest first."""
    equipment = equipment_core.get_for_actor(db, actor, equipment_id)
    return [_session_to_response(r) for r in charging.list_recent(db, equipment.id, limit)]


@router.post(
    "/equipment/{equipment_id}/charging/start",
    response_model=ChargingSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
def start_charging(
    equipment_id: str,
    body: StartChargingRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ChargingSessionResponse:
    """Open a charging session on the equipment."""
    equipment = equipment_core.get_for_actor(db, actor, equipment_id)
    row = charging.start_charging(db, actor, equipment, body.charging_point_id, body.meter_reading)
    return _session_to_response(row)


@router.post("/charging-sessions/{session_id}/stop", response_model=ChargingSessionResponse)
def stop_charging(
    session_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ChargingSessionResponse:
    """Close an open charging session."""
    return _session_to_response(charging.stop_charging(db, actor, session_id))


@router.get("/charging-sessions", response_model=list[ChargingSessionResponse])
def list_charging_records(
    location_id: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ChargingSessionResponse]:
    """Charging records report, filtered by location and active/completed status."""
    rows = charging.list_records(db, actor, location_id=location_id, status=status)
    return [_session_to_response(r) for r in rows]


def _authorize_stream(session_factory: Callable[[], Session], token: Optional[str], equipment_id: str) -> None:
    """Check the token and location scope in a short-lived session."""
    with session_factory() as db:
        actor = actor_from_profile(profile_for_token(db, token))
        equipment_core.get_for_actor(db, actor, equipment_id)


@router.websocket("/equipment/{equipment_id}/events")
async def equipment_events(
    websocket: WebSocket,
    equipment_id: str,
    token: Optional[str] = None,
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> None:
    """
    Push change notifications (charging_session and swap_event inserts/updates)
    for one equipment unit. The token is passed as a query parameter.
    The database is only touched during the handshake; no connection is held while streaming.
    """
    try:
        await run_in_threadpool(_authorize_stream, session_factory, token, equipment_id)
    except (InvalidCredentials, TrackerError) as e:
        LOG.info("Event stream refused for equipment %s: %s", equipment_id, e)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def observer(notification: notifications.ChangeNotification) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, notification.to_dict())

    unsubscribers = [
        notifications.feed.subscribe(table, equipment_id, observer)
        for table in (notifications.TABLE_CHARGING_SESSION, notifications.TABLE_SWAP_EVENT)
    ]
    await websocket.accept()

    async def forward() -> None:
        while True:
            await websocket.send_json(await queue.get())

    sender = asyncio.create_task(forward())
    try:
        while True:
            # Inbound messages are ignored; receiving detects the disconnect.
            await websocket.receive_text()
    except WebSocketDisconnect:
        LOG.debug("Event stream closed for equipment %s", equipment_id)
    finally:
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
            await sender
        for unsubscribe in unsubscribers:
            unsubscribe()
