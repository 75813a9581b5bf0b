"""User model."""
from typing import Optional

from sqlalchemy import CheckConstraint, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, RecordMixin


class User(RecordMixin, Base):
    """User account with credentials and an optional home location."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        CheckConstraint(
            "home_lat IS NULL OR (home_lat >= -90 AND home_lat <= 90)",
            name="ck_users_home_lat_range",
        ),
        CheckConstraint(
            "home_lng IS NULL OR (home_lng >= -180 AND home_lng <= 180)",
            name="ck_users_home_lng_range",
        ),
        CheckConstraint(
            "(home_lat IS NULL AND home_lng IS NULL AND home_address IS NULL) OR "
            "(home_lat IS NOT NULL AND home_lng IS NOT NULL AND home_address IS NOT NULL)",
            name="ck_users_home_location_complete",
        ),
    )

    # Stored lowercased; the unique index is what makes duplicates impossible.
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="user", nullable=False)
    home_lat: Mapped[Optional[float]] = mapped_column(Float)
    home_lng: Mapped[Optional[float]] = mapped_column(Float)
    home_address: Mapped[Optional[str]] = mapped_column(String(500))

    @property
    def home_location(self) -> Optional[dict]:
        if self.home_lat is None:
            return None
        return {"lat": self.home_lat, "lng": self.home_lng, "address": self.home_address}

    def __repr__(self) -> str:
        return f"<User(email={self.email}, role={self.role})>"
