"""Charging point registry: per-location labels managed by admins.

Points carry no lock: any number of sessions may reference the same point.
"""
import logging

from sqlalchemy.orm import Session

from models.charging_point import ChargingPoint
from repositories import charging_point_repository as points_repo
from repositories.location_repository import get_location
from tracker_core import access_policy as policy
from tracker_core.errors import NotFound, ValidationError, upstream_errors
from tracker_core.identity import Actor

LOG = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


def _validate_name(name) -> str:
    text = str(name).strip() if name is not None else ""
    if not text:
        raise ValidationError("name", "Charging point name is required")
    if len(text) > MAX_NAME_LENGTH:
        raise ValidationError("name", f"Charging point name must be at most {MAX_NAME_LENGTH} characters")
    return text


def _load(db: Session, charging_point_id: str) -> ChargingPoint:
    with upstream_errors("load charging point"):
        point = points_repo.get_charging_point(db, charging_point_id)
    if point is None:
        raise NotFound("charging_point")
    return point


def list_points(db: Session, actor: Actor, location_id: str) -> list[ChargingPoint]:
    """Charging points at a location (readable by anyone scoped to it, for the start form)."""
    policy.require(policy.can_read_location(actor, location_id))
    with upstream_errors("list charging points"):
        if get_location(db, location_id) is None:
            raise NotFound("location")
        return points_repo.list_charging_points_by_location(db, location_id)


def create_point(db: Session, actor: Actor, location_id: str, name) -> ChargingPoint:
    policy.require(policy.can_write_charging_point(actor, location_id))
    clean = _validate_name(name)
    with upstream_errors("create charging point"):
        if get_location(db, location_id) is None:
            raise NotFound("location")
        point = points_repo.create_charging_point(db, location_id=location_id, name=clean)
    LOG.info("Charging point %s (%s) created at %s by %s", point.id, point.name, location_id, actor.id)
    return point


def rename_point(db: Session, actor: Actor, charging_point_id: str, name) -> ChargingPoint:
    point = _load(db, charging_point_id)
    policy.require(policy.can_write_charging_point(actor, point.location_id))
    clean = _validate_name(name)
    with upstream_errors("update charging point"):
        point = points_repo.rename_charging_point(db, charging_point_id, clean)
    LOG.info("Charging point %s renamed to %s by %s", point.id, point.name, actor.id)
    return point


def delete_point(db: Session, actor: Actor, charging_point_id: str) -> None:
    """Delete a point (super admin only). Past sessions keep their charging_point_id tag."""
    point = _load(db, charging_point_id)
    policy.require(policy.can_delete_charging_point(actor, point.location_id))
    with upstream_errors("delete charging point"):
        points_repo.delete_charging_point(db, charging_point_id)
    LOG.info("Charging point %s deleted by %s", charging_point_id, actor.id)
