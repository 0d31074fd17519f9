"""Location API routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_current_actor
from db import get_db
from repositories.equipment_repository import count_equipment_by_location
from schemas.locations import LocationCreate, LocationResponse, LocationUpdate
from tracker_core import profiles
from tracker_core.identity import Actor

router = APIRouter(prefix="/locations", tags=["locations"])


def _location_to_response(db: Session, loc) -> LocationResponse:
    """Build LocationResponse from model instance."""
    return LocationResponse(
        id=loc.id,
        code=loc.code,
        name=loc.name,
        is_active=loc.is_active,
        created_at=loc.created_at,
        equipment_count=count_equipment_by_location(db, loc.id),
    )


@router.get("", response_model=list[LocationResponse])
def list_locations(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[LocationResponse]:
    """List locations visible to the caller."""
    return [_location_to_response(db, loc) for loc in profiles.list_visible_locations(db, actor)]


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
def create_location(
    body: LocationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> LocationResponse:
    """Create a new location (super admin)."""
    loc = profiles.create_location(db, actor, body.code, body.name)
    return _location_to_response(db, loc)


@router.patch("/{location_id}", response_model=LocationResponse)
def update_location(
    location_id: str,
    body: LocationUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> LocationResponse:
    """Activate or deactivate a location (super admin)."""
    loc = profiles.set_location_active(db, actor, location_id, body.is_active)
    return _location_to_response(db, loc)
