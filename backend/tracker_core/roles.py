"""Closed vocabularies shared by models, policy and API: roles and equipment status."""
from enum import Enum


class Role(str, Enum):
    """Profile role. super_admin has no location; admin and user are bound to one."""
    super_admin = "super_admin"
    admin = "admin"
    user = "user"


class EquipmentStatus(str, Enum):
    """Declared equipment status. Only operational equipment may start charging."""
    operational = "operational"
    maintenance = "maintenance"
    faulty = "faulty"


ROLE_VALUES = tuple(r.value for r in Role)
EQUIPMENT_STATUS_VALUES = tuple(s.value for s in EquipmentStatus)


def role_requires_location(role: Role) -> bool:
    """True for admin and user; super_admin profiles carry no location."""
    return role is not Role.super_admin
