"""Equipment directory: location-scoped listing, code resolution, and record maintenance."""
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.equipment import Equipment
from repositories import charging_session_repository as sessions_repo
from repositories import equipment_repository as equipment_repo
from repositories import swap_event_repository as swaps_repo
from repositories.location_repository import get_location
from tracker_core import access_policy as policy
from tracker_core.errors import ConflictError, NotFound, ValidationError, upstream_errors
from tracker_core.identity import Actor
from tracker_core.roles import EquipmentStatus

LOG = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "equipment_code",
    "equipment_type",
    "status",
    "last_inspection_date",
    "next_inspection_date",
    "notes",
)


def _require_location(db: Session, location_id: str) -> None:
    if get_location(db, location_id) is None:
        raise NotFound("location")


def _validate_status(status: Any) -> str:
    try:
        return EquipmentStatus(status).value
    except ValueError as e:
        raise ValidationError("status", f"Status must be one of: {', '.join(s.value for s in EquipmentStatus)}") from e


def _validate_text(field: str, value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(field, f"{field.replace('_', ' ').capitalize()} is required")
    return text


def _validate_inspection_dates(last: Optional[date], upcoming: Optional[date]) -> None:
    if last is not None and upcoming is not None and upcoming < last:
        raise ValidationError("next_inspection_date", "Next inspection date cannot be before the last inspection")


def list_by_location(db: Session, actor: Actor, location_id: str) -> list[Equipment]:
    """All equipment at a location visible to the actor."""
    policy.require(policy.can_read_location(actor, location_id))
    with upstream_errors("list equipment"):
        _require_location(db, location_id)
        return equipment_repo.list_equipment_by_location(db, location_id)


def resolve_by_code(
    db: Session,
    actor: Actor,
    location_id: str,
    equipment_code: str,
    *,
    operational_only: bool = True,
) -> Equipment:
    """
    Resolve a human-visible code at a location. With operational_only (the operator
    start flow), equipment under maintenance or faulty is not resolvable at all.
    """
    policy.require(policy.can_read_location(actor, location_id))
    code = (equipment_code or "").strip()
    if not code:
        raise ValidationError("equipment_code", "Equipment number is required")
    status = EquipmentStatus.operational.value if operational_only else None
    with upstream_errors("resolve equipment"):
        equipment = equipment_repo.get_equipment_by_code(db, location_id, code, status=status)
    if equipment is None:
        raise NotFound("equipment", f"Equipment {code} not found or not accessible")
    return equipment


def get_for_actor(db: Session, actor: Actor, equipment_id: str) -> Equipment:
    """Fetch one equipment record, applying location scoping."""
    with upstream_errors("load equipment"):
        equipment = equipment_repo.get_equipment(db, equipment_id)
    if equipment is None:
        raise NotFound("equipment")
    policy.require(policy.can_read_location(actor, equipment.location_id))
    return equipment


def create(db: Session, actor: Actor, location_id: str, fields: dict[str, Any]) -> Equipment:
    """Create an equipment record at a location (admin at that location, or super admin)."""
    policy.require(policy.can_write_equipment(actor, location_id))
    code = _validate_text("equipment_code", fields.get("equipment_code"))
    equipment_type = _validate_text("equipment_type", fields.get("equipment_type"))
    status = _validate_status(fields.get("status") or EquipmentStatus.operational.value)
    _validate_inspection_dates(fields.get("last_inspection_date"), fields.get("next_inspection_date"))
    with upstream_errors("create equipment"):
        _require_location(db, location_id)
        if equipment_repo.get_equipment_by_code(db, location_id, code) is not None:
            raise ConflictError(f"Equipment {code} already exists at this location")
        try:
            equipment = equipment_repo.create_equipment(
                db,
                location_id=location_id,
                equipment_code=code,
                equipment_type=equipment_type,
                status=status,
                last_inspection_date=fields.get("last_inspection_date"),
                next_inspection_date=fields.get("next_inspection_date"),
                notes=fields.get("notes") or "",
                created_by=actor.id,
            )
        except IntegrityError as e:
            raise ConflictError(f"Equipment {code} already exists at this location") from e
    LOG.info("Equipment %s created at location %s by %s", equipment.equipment_code, location_id, actor.id)
    return equipment


def update(db: Session, actor: Actor, equipment_id: str, fields: dict[str, Any]) -> Equipment:
    """Update an equipment record. Location is fixed; updated_by is stamped from the actor."""
    with upstream_errors("load equipment"):
        equipment = equipment_repo.get_equipment(db, equipment_id)
    if equipment is None:
        raise NotFound("equipment")
    policy.require(policy.can_write_equipment(actor, equipment.location_id))

    changes: dict[str, Any] = {k: v for k, v in fields.items() if k in _UPDATABLE_FIELDS}
    if "equipment_code" in changes:
        changes["equipment_code"] = _validate_text("equipment_code", changes["equipment_code"])
    if "equipment_type" in changes:
        changes["equipment_type"] = _validate_text("equipment_type", changes["equipment_type"])
    if "status" in changes:
        changes["status"] = _validate_status(changes["status"])
    if "notes" in changes and changes["notes"] is None:
        changes["notes"] = ""
    _validate_inspection_dates(
        changes.get("last_inspection_date", equipment.last_inspection_date),
        changes.get("next_inspection_date", equipment.next_inspection_date),
    )
    changes["updated_by"] = actor.id

    with upstream_errors("update equipment"):
        new_code = changes.get("equipment_code")
        if new_code and new_code != equipment.equipment_code:
            if equipment_repo.get_equipment_by_code(db, equipment.location_id, new_code) is not None:
                raise ConflictError(f"Equipment {new_code} already exists at this location")
        try:
            updated = equipment_repo.update_equipment(db, equipment_id, changes)
        except IntegrityError as e:
            raise ConflictError(f"Equipment {new_code} already exists at this location") from e
    LOG.info("Equipment %s updated by %s (%s)", updated.equipment_code, actor.id, ", ".join(sorted(changes)))
    return updated


def delete(db: Session, actor: Actor, equipment_id: str) -> None:
    """Delete an equipment record (super admin only). Records with history are kept."""
    with upstream_errors("load equipment"):
        equipment = equipment_repo.get_equipment(db, equipment_id)
    if equipment is None:
        raise NotFound("equipment")
    policy.require(policy.can_delete_equipment(actor, equipment.location_id))
    with upstream_errors("delete equipment"):
        if (
            sessions_repo.count_sessions_for_equipment(db, equipment_id) > 0
            or swaps_repo.count_swaps_for_equipment(db, equipment_id) > 0
        ):
            raise ConflictError(
                f"Equipment {equipment.equipment_code} has charging or swap history and cannot be deleted"
            )
        equipment_repo.delete_equipment(db, equipment_id)
    LOG.info("Equipment %s deleted by %s", equipment.equipment_code, actor.id)
