"""Location repository: list, get, create, activate/deactivate."""
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.location import Location


def list_locations(session: Session, *, active_only: bool = False) -> list[Location]:
    """Return all locations ordered by code."""
    query = select(Location).order_by(Location.code)
    if active_only:
        query = query.where(Location.is_active.is_(True))
    result = session.execute(query)
    return list(result.scalars().all())


def get_location(session: Session, location_id: str) -> Optional[Location]:
    """Return a location by id or None."""
    return session.get(Location, location_id)


def get_location_by_code(session: Session, code: str) -> Optional[Location]:
    """Return a location by its unique code or None."""
    return session.execute(select(Location).where(Location.code == code)).scalar_one_or_none()


def create_location(session: Session, code: str, name: str, location_id: str | None = None) -> Location:
    """Create a location, commit, and return it. Id is generated if not provided."""
    loc = Location(id=location_id or str(uuid.uuid4()), code=code, name=name, is_active=True)
    session.add(loc)
    session.commit()
    session.refresh(loc)
    return loc


def set_location_active(session: Session, location_id: str, is_active: bool) -> Optional[Location]:
    """Set is_active on a location. Returns the updated location or None if not found."""
    loc = get_location(session, location_id)
    if loc is None:
        return None
    loc.is_active = is_active
    session.commit()
    session.refresh(loc)
    return loc


def count_locations(session: Session) -> int:
    """Return the number of locations (for seeding)."""
    result = session.execute(select(func.count()).select_from(Location))
    return result.scalar() or 0
