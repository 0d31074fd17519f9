"""UserProfile model: application profile for an identity-provider subject."""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from models import Base
from utils.clock import utcnow


class UserProfile(Base):
    """user_profile table. id is the identity provider's subject id; never deleted, only deactivated."""

    __tablename__ = "user_profile"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    location_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("location.id"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    charging_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    swapping_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        CheckConstraint("role IN ('super_admin', 'admin', 'user')", name="ck_user_profile_role"),
        # super_admin has no location; admin and user must have one.
        CheckConstraint(
            "(role = 'super_admin' AND location_id IS NULL) "
            "OR (role <> 'super_admin' AND location_id IS NOT NULL)",
            name="ck_user_profile_role_location",
        ),
    )
