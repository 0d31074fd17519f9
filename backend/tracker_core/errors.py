"""Typed failures for tracker operations.

Each expected failure mode has its own class so callers branch on the type
rather than on message text. ``UpstreamError`` is the only one that signals an
unexpected condition (storage or identity provider failure); its cause is kept
for logging and never shown to the user.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

LOG = logging.getLogger(__name__)


class TrackerError(Exception):
    """Base class for all tracker failures."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Serializable payload for API responses."""
        return {"detail": self.message, "code": self.code}


class PermissionDenied(TrackerError):
    """An access policy rule was violated. ``rule`` names which one."""

    code = "permission_denied"

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule

    def to_dict(self) -> dict:
        return {**super().to_dict(), "rule": self.rule}


class ValidationError(TrackerError):
    """Malformed or missing input. ``field`` names the offending input."""

    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        return {**super().to_dict(), "field": self.field}


class ConflictError(TrackerError):
    """The write would break an invariant (double-open or already-closed session, duplicates)."""

    code = "conflict"


class NotFound(TrackerError):
    """A referenced equipment, profile, location or charging point does not exist."""

    code = "not_found"

    def __init__(self, entity: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{entity.replace('_', ' ').capitalize()} not found")
        self.entity = entity

    def to_dict(self) -> dict:
        return {**super().to_dict(), "entity": self.entity}


class UpstreamError(TrackerError):
    """Storage or identity provider failure. Not retried here."""

    code = "upstream_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


# Messages surfaced to operators.
MSG_ALREADY_CHARGING = "Equipment is already charging"
MSG_ALREADY_CLOSED = "Charging session is already closed"
MSG_CHARGING_POINT_REQUIRED = "Charging point is required"
MSG_INVALID_METER_READING = "Invalid meter reading"


@contextmanager
def upstream_errors(operation: str) -> Iterator[None]:
    """Convert unexpected storage failures into UpstreamError, keeping the cause for logs."""
    try:
        yield
    except SQLAlchemyError as e:
        LOG.exception("Storage failure during %s", operation)
        raise UpstreamError(f"Storage unavailable, could not {operation}", e) from e
