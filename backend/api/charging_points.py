"""Charging point API routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_current_actor
from db import get_db
from schemas.charging_points import ChargingPointCreate, ChargingPointResponse, ChargingPointUpdate
from tracker_core import charging_points
from tracker_core.identity import Actor

router = APIRouter(tags=["charging-points"])


def _point_to_response(p) -> ChargingPointResponse:
    return ChargingPointResponse(
        id=p.id,
        name=p.name,
        location_id=p.location_id,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


@router.get("/locations/{location_id}/charging-points", response_model=list[ChargingPointResponse])
def list_charging_points(
    location_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ChargingPointResponse]:
    """List charging points at a location."""
    return [_point_to_response(p) for p in charging_points.list_points(db, actor, location_id)]


@router.post(
    "/locations/{location_id}/charging-points",
    response_model=ChargingPointResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_charging_point(
    location_id: str,
    body: ChargingPointCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ChargingPointResponse:
    """Create a charging point at a location."""
    return _point_to_response(charging_points.create_point(db, actor, location_id, body.name))


@router.patch("/charging-points/{charging_point_id}", response_model=ChargingPointResponse)
def rename_charging_point(
    charging_point_id: str,
    body: ChargingPointUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ChargingPointResponse:
    """Rename a charging point."""
    return _point_to_response(charging_points.rename_point(db, actor, charging_point_id, body.name))


@router.delete("/charging-points/{charging_point_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_charging_point(
    charging_point_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> None:
    """Delete a charging point (super admin)."""
    charging_points.delete_point(db, actor, charging_point_id)
