from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from inventory_tracker.database.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, default="")
    is_admin = Column(Boolean, nullable=False, default=False)
    monthly_forecast = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


__all__ = ["UserProfile"]
