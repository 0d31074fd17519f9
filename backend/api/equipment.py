"""Equipment API routes."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.deps import get_current_actor
from db import get_db
from schemas.equipment import EquipmentCreate, EquipmentResponse, EquipmentUpdate
from tracker_core import equipment as equipment_core
from tracker_core.identity import Actor

router = APIRouter(tags=["equipment"])


def _equipment_to_response(e) -> EquipmentResponse:
    """Build EquipmentResponse from model instance."""
    return EquipmentResponse(
        id=e.id,
        location_id=e.location_id,
        equipment_code=e.equipment_code,
        equipment_type=e.equipment_type,
        status=e.status,
        last_inspection_date=e.last_inspection_date,
        next_inspection_date=e.next_inspection_date,
        notes=e.notes or "",
        created_by=e.created_by,
        updated_by=e.updated_by,
        created_at=e.created_at,
        updated_at=e.updated_at,
    )


@router.get("/locations/{location_id}/equipment", response_model=list[EquipmentResponse])
def list_equipment(
    location_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[EquipmentResponse]:
    """List all equipment at a location."""
    return [_equipment_to_response(e) for e in equipment_core.list_by_location(db, actor, location_id)]


@router.get("/locations/{location_id}/equipment/resolve", response_model=EquipmentResponse)
def resolve_equipment(
    location_id: str,
    code: str = Query(..., min_length=1),
    operational_only: bool = True,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> EquipmentResponse:
    """Resolve an equipment number at a location, as typed by an operator."""
    equipment = equipment_core.resolve_by_code(db, actor, location_id, code, operational_only=operational_only)
    return _equipment_to_response(equipment)


@router.post(
    "/locations/{location_id}/equipment",
    response_model=EquipmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_equipment(
    location_id: str,
    body: EquipmentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> EquipmentResponse:
    """Create an equipment record at a location."""
    return _equipment_to_response(equipment_core.create(db, actor, location_id, body.model_dump()))


@router.get("/equipment/{equipment_id}", response_model=EquipmentResponse)
def get_equipment(
    equipment_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> EquipmentResponse:
    """Get one equipment record."""
    return _equipment_to_response(equipment_core.get_for_actor(db, actor, equipment_id))


@router.patch("/equipment/{equipment_id}", response_model=EquipmentResponse)
def update_equipment(
    equipment_id: str,
    body: EquipmentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> EquipmentResponse:
    """Update an equipment record. Only fields present in the body are changed."""
    fields = body.model_dump(exclude_unset=True)
    return _equipment_to_response(equipment_core.update(db, actor, equipment_id, fields))


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_equipment(
    equipment_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> None:
    """Delete an equipment record with no charging or swap history (super admin)."""
    equipment_core.delete(db, actor, equipment_id)
