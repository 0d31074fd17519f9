"""Charging point repository: list, get, create, rename, delete."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.charging_point import ChargingPoint


def list_charging_points_by_location(session: Session, location_id: str) -> list[ChargingPoint]:
    """Return all charging points for a location ordered by name."""
    result = session.execute(
        select(ChargingPoint)
        .where(ChargingPoint.location_id == location_id)
        .order_by(ChargingPoint.name)
    )
    return list(result.scalars().all())


def get_charging_point(session: Session, charging_point_id: str) -> Optional[ChargingPoint]:
    """Return a charging point by id or None."""
    return session.get(ChargingPoint, charging_point_id)


def create_charging_point(session: Session, *, location_id: str, name: str) -> ChargingPoint:
    """Create a charging point, commit, and return it."""
    point = ChargingPoint(location_id=location_id, name=name)
    session.add(point)
    session.commit()
    session.refresh(point)
    return point


def rename_charging_point(session: Session, charging_point_id: str, name: str) -> Optional[ChargingPoint]:
    """Rename a charging point. Returns it or None if not found."""
    point = get_charging_point(session, charging_point_id)
    if point is None:
        return None
    point.name = name
    session.commit()
    session.refresh(point)
    return point


def delete_charging_point(session: Session, charging_point_id: str) -> bool:
    """Delete a charging point. Sessions keep their charging_point_id tag. Returns False if not found."""
    point = get_charging_point(session, charging_point_id)
    if point is None:
        return False
    session.delete(point)
    session.commit()
    return True
