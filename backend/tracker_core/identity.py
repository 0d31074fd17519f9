"""Identity boundary: bearer token -> subject id -> validated Actor.

Tokens come from the external identity provider (HS256 JWT, subject in ``sub``).
Profile rows are checked here once, so the rest of the core can rely on a
closed ``Role`` and required boolean access flags.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from jose import JWTError, jwt

from models.user_profile import UserProfile
from tracker_core.roles import Role, role_requires_location
from utils.clock import utcnow
from utils.config import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET


class InvalidCredentials(Exception):
    """Token missing, malformed, expired, or not bound to a usable profile."""


@dataclass(frozen=True)
class Actor:
    """The acting profile, as seen by policy and controllers."""

    id: str
    role: Role
    location_id: Optional[str]
    is_active: bool
    charging_access: bool
    swapping_access: bool

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.super_admin


def actor_from_profile(profile: UserProfile) -> Actor:
    """Build an Actor from a profile row, rejecting rows that break the role/location rule."""
    try:
        role = Role(profile.role)
    except ValueError as e:
        raise InvalidCredentials(f"Profile {profile.id} has unknown role {profile.role!r}") from e
    if role_requires_location(role) and not profile.location_id:
        raise InvalidCredentials(f"Profile {profile.id} ({role.value}) has no location")
    if not role_requires_location(role) and profile.location_id:
        raise InvalidCredentials(f"Profile {profile.id} (super_admin) must not have a location")
    return Actor(
        id=profile.id,
        role=role,
        location_id=profile.location_id,
        is_active=bool(profile.is_active),
        charging_access=bool(profile.charging_access),
        swapping_access=bool(profile.swapping_access),
    )


def decode_subject(token: str) -> str:
    """Verify a bearer token and return its subject id."""
    options = {"verify_aud": bool(JWT_AUDIENCE)}
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE or None,
            options=options,
        )
    except JWTError as e:
        raise InvalidCredentials("Invalid token") from e
    subject = payload.get("sub")
    if not subject:
        raise InvalidCredentials("Token has no subject")
    return subject


def issue_token(subject_id: str, expires_delta: Optional[timedelta] = None, **claims: Any) -> str:
    """Mint a token the way the identity provider does (tests and local tooling)."""
    to_encode = {"sub": subject_id, **claims}
    if JWT_AUDIENCE:
        to_encode.setdefault("aud", JWT_AUDIENCE)
    to_encode["exp"] = utcnow() + (expires_delta or timedelta(hours=8))
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)
