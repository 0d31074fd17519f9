"""Battery swap recording. Swaps are independent append-only events; there is no state to guard."""
import logging
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from models.equipment import Equipment
from models.swap_event import SwapEvent
from repositories import swap_event_repository as swaps_repo
from tracker_core import access_policy as policy
from tracker_core import notifications
from tracker_core.errors import ValidationError, upstream_errors
from tracker_core.identity import Actor
from tracker_core.meter import parse_meter_reading
from utils.clock import as_utc

LOG = logging.getLogger(__name__)

MAX_BATTERY_NUMBER_LENGTH = 64


def _normalize_battery_number(battery_number: Optional[str]) -> Optional[str]:
    if battery_number is None:
        return None
    text = str(battery_number).strip()
    if not text:
        return None
    if len(text) > MAX_BATTERY_NUMBER_LENGTH:
        raise ValidationError("battery_number", f"Battery number must be at most {MAX_BATTERY_NUMBER_LENGTH} characters")
    return text


def record_swap(
    db: Session,
    actor: Actor,
    equipment: Equipment,
    meter_reading,
    battery_number: Optional[str] = None,
) -> SwapEvent:
    """Append one swap event (count=1) for equipment and return it."""
    policy.require(policy.can_record_swap(actor, equipment.location_id))
    reading = parse_meter_reading(meter_reading)
    battery = _normalize_battery_number(battery_number)
    with upstream_errors("record battery swap"):
        event = swaps_repo.create_swap_event(
            db,
            user_id=actor.id,
            location_id=equipment.location_id,
            equipment_id=equipment.id,
            meter_reading=reading,
            battery_number=battery,
        )
    LOG.info(
        "Battery swap %s recorded on %s (battery %s, meter %s) by %s",
        event.id,
        equipment.equipment_code,
        battery or "-",
        reading,
        actor.id,
    )
    notifications.publish(notifications.TABLE_SWAP_EVENT, "insert", event.id, equipment.id)
    return event


def total_swaps(db: Session, equipment_id: str) -> int:
    """Number of swaps ever recorded for equipment, counted on demand."""
    with upstream_errors("count battery swaps"):
        return swaps_repo.count_swaps_for_equipment(db, equipment_id)


def list_swaps(
    db: Session,
    actor: Actor,
    *,
    location_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[SwapEvent]:
    """Swap log report: newest first, location-scoped, inclusive date range on created_at (UTC days)."""
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValidationError("end_date", "End date cannot be before start date")
    scope = policy.scoped_location(actor, location_id)
    created_from = as_utc(datetime.combine(start_date, time.min)) if start_date else None
    created_to = as_utc(datetime.combine(end_date, time.max)) if end_date else None
    with upstream_errors("list battery swaps"):
        return swaps_repo.list_swap_events(
            db,
            location_id=scope,
            created_from=created_from,
            created_to=created_to,
        )
