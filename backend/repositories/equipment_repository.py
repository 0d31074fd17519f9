"""Equipment repository: list, get, resolve by code, create, update, delete."""
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.equipment import Equipment


def list_equipment_by_location(
    session: Session,
    location_id: str,
    *,
    status: Optional[str] = None,
) -> list[Equipment]:
    """Return all equipment for a location ordered by code, optionally only one status."""
    query = (
        select(Equipment)
        .where(Equipment.location_id == location_id)
        .order_by(Equipment.equipment_code)
    )
    if status is not None:
        query = query.where(Equipment.status == status)
    result = session.execute(query)
    return list(result.scalars().all())


def get_equipment(session: Session, equipment_id: str) -> Optional[Equipment]:
    """Return equipment by id or None."""
    return session.get(Equipment, equipment_id)


def get_equipment_by_code(
    session: Session,
    location_id: str,
    equipment_code: str,
    *,
    status: Optional[str] = None,
) -> Optional[Equipment]:
    """Return equipment at a location by its human-visible code (and status, if given) or None."""
    query = select(Equipment).where(
        Equipment.location_id == location_id,
        Equipment.equipment_code == equipment_code,
    )
    if status is not None:
        query = query.where(Equipment.status == status)
    return session.execute(query).scalar_one_or_none()


def create_equipment(
    session: Session,
    *,
    location_id: str,
    equipment_code: str,
    equipment_type: str,
    status: str = "operational",
    last_inspection_date=None,
    next_inspection_date=None,
    notes: str = "",
    created_by: Optional[str] = None,
) -> Equipment:
    """Create an equipment record, commit, and return it."""
    equipment = Equipment(
        location_id=location_id,
        equipment_code=equipment_code,
        equipment_type=equipment_type,
        status=status,
        last_inspection_date=last_inspection_date,
        next_inspection_date=next_inspection_date,
        notes=notes,
        created_by=created_by,
        updated_by=created_by,
    )
    session.add(equipment)
    session.commit()
    session.refresh(equipment)
    return equipment


def update_equipment(session: Session, equipment_id: str, changes: dict[str, Any]) -> Optional[Equipment]:
    """Apply column changes to an equipment record. Returns it or None if not found."""
    equipment = get_equipment(session, equipment_id)
    if equipment is None:
        return None
    # Flush in a savepoint so a unique-code violation leaves the outer transaction usable.
    with session.begin_nested():
        for key, value in changes.items():
            setattr(equipment, key, value)
    session.commit()
    session.refresh(equipment)
    return equipment


def delete_equipment(session: Session, equipment_id: str) -> bool:
    """Delete equipment by id. Returns True if deleted, False if not found."""
    equipment = get_equipment(session, equipment_id)
    if equipment is None:
        return False
    session.delete(equipment)
    session.commit()
    return True


def count_equipment_by_location(session: Session, location_id: str) -> int:
    """Return the number of equipment records at a location."""
    result = session.execute(
        select(func.count()).select_from(Equipment).where(Equipment.location_id == location_id)
    )
    return result.scalar() or 0
