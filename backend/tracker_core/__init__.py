# Tracker core: access policy, equipment directory, charging and swap controllers
from tracker_core.errors import (
    ConflictError,
    NotFound,
    PermissionDenied,
    TrackerError,
    UpstreamError,
    ValidationError,
)
from tracker_core.identity import Actor
from tracker_core.roles import EquipmentStatus, Role

__all__ = [
    "Actor",
    "ConflictError",
    "EquipmentStatus",
    "NotFound",
    "PermissionDenied",
    "Role",
    "TrackerError",
    "UpstreamError",
    "ValidationError",
]
