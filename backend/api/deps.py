"""Request dependencies: resolve the bearer token to the acting profile."""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from db import get_db
from models.user_profile import UserProfile
from repositories.user_profile_repository import get_profile
from tracker_core.errors import upstream_errors
from tracker_core.identity import Actor, InvalidCredentials, actor_from_profile, decode_subject

LOG = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def profile_for_token(db: Session, token: Optional[str]) -> UserProfile:
    """Verify a token and load its profile. Raises InvalidCredentials."""
    if not token:
        raise InvalidCredentials("Missing token")
    subject = decode_subject(token)
    with upstream_errors("load profile"):
        profile = get_profile(db, subject)
    if profile is None:
        raise InvalidCredentials(f"No profile for subject {subject}")
    return profile


def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserProfile:
    """FastAPI dependency: the caller's profile row (inactive profiles included)."""
    try:
        return profile_for_token(db, credentials.credentials if credentials else None)
    except InvalidCredentials as e:
        LOG.info("Rejected credentials: %s", e)
        raise _credentials_exception() from e


def get_current_actor(profile: UserProfile = Depends(get_current_profile)) -> Actor:
    """FastAPI dependency: the caller as a validated Actor."""
    try:
        return actor_from_profile(profile)
    except InvalidCredentials as e:
        LOG.warning("Rejected malformed profile: %s", e)
        raise _credentials_exception() from e
