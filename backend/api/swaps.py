"""Battery swap API routes."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_current_actor
from db import get_db
from schemas.swaps import SwapCreate, SwapEventResponse, SwapLogResponse, SwapTotalResponse
from tracker_core import equipment as equipment_core
from tracker_core import swapping
from tracker_core.identity import Actor

router = APIRouter(tags=["swaps"])


def _swap_to_response(s) -> SwapEventResponse:
    """Build SwapEventResponse from model instance."""
    return SwapEventResponse(
        id=s.id,
        user_id=s.user_id,
        location_id=s.location_id,
        equipment_id=s.equipment_id,
        count=s.count,
        meter_reading=None if s.meter_reading is None else f"{s.meter_reading:.2f}",
        battery_number=s.battery_number,
        created_at=s.created_at,
    )


@router.post(
    "/equipment/{equipment_id}/swaps",
    response_model=SwapEventResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_swap(
    equipment_id: str,
    body: SwapCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> SwapEventResponse:
    """Record one battery swap on the equipment."""
    equipment = equipment_core.get_for_actor(db, actor, equipment_id)
    event = swapping.record_swap(db, actor, equipment, body.meter_reading, body.battery_number)
    return _swap_to_response(event)


@router.get("/equipment/{equipment_id}/swaps/total", response_model=SwapTotalResponse)
def total_swaps(
    equipment_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> SwapTotalResponse:
    """Total swaps ever recorded for the equipment."""
    equipment = equipment_core.get_for_actor(db, actor, equipment_id)
    return SwapTotalResponse(equipment_id=equipment.id, total_swaps=swapping.total_swaps(db, equipment.id))


@router.get("/swaps", response_model=SwapLogResponse)
def list_swaps(
    location_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> SwapLogResponse:
    """Swap log report, newest first."""
    events = swapping.list_swaps(db, actor, location_id=location_id, start_date=start_date, end_date=end_date)
    return SwapLogResponse(total_swaps=sum(e.count for e in events), items=[_swap_to_response(e) for e in events])
