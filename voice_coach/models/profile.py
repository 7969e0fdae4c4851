"""SQLAlchemy model for learner profiles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String

from .base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=True)
    native_language = Column(String(50), nullable=True)
    target_language = Column(String(50), nullable=True, default="english")
    daily_goal_mins = Column(Integer, nullable=False, default=10)
    streak_days = Column(Integer, nullable=False, default=0)
    last_active_date = Column(Date, nullable=True)
    onboarding_complete = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


__all__ = ["Profile"]
