"""Swap ledger: append-only battery swap events."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.swap_event import SwapEvent


def create_swap_event(
    session: Session,
    *,
    user_id: str,
    location_id: str,
    equipment_id: str,
    meter_reading: Optional[Decimal],
    battery_number: Optional[str],
) -> SwapEvent:
    """Append one swap event (count=1), commit, and return it."""
    event = SwapEvent(
        user_id=user_id,
        location_id=location_id,
        equipment_id=equipment_id,
        count=1,
        meter_reading=meter_reading,
        battery_number=battery_number,
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


def count_swaps_for_equipment(session: Session, equipment_id: str) -> int:
    """Return the number of swap events for an equipment unit."""
    result = session.execute(
        select(func.count()).select_from(SwapEvent).where(SwapEvent.equipment_id == equipment_id)
    )
    return result.scalar() or 0


def list_swap_events(
    session: Session,
    *,
    location_id: Optional[str] = None,
    equipment_id: Optional[str] = None,
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
) -> list[SwapEvent]:
    """Return swap events newest first, filtered by location, equipment and an inclusive created_at range."""
    query = select(SwapEvent).order_by(SwapEvent.created_at.desc(), SwapEvent.id.desc())
    if location_id is not None:
        query = query.where(SwapEvent.location_id == location_id)
    if equipment_id is not None:
        query = query.where(SwapEvent.equipment_id == equipment_id)
    if created_from is not None:
        query = query.where(SwapEvent.created_at >= created_from)
    if created_to is not None:
        query = query.where(SwapEvent.created_at <= created_to)
    result = session.execute(query)
    return list(result.scalars().all())
