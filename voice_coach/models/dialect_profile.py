"""SQLAlchemy model for per-user dialect baselines."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, String

from .base import Base
from .session import JsonColumn


class DialectProfile(Base):
    __tablename__ = "dialect_profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    detected_region = Column(String(50), nullable=False)
    filler_patterns = Column(JsonColumn, nullable=False, default=dict)
    avg_wpm_baseline = Column(Float, nullable=False, default=0.0)
    weak_phonemes = Column(JsonColumn, nullable=False, default=list)
    onboarding_session_ids = Column(JsonColumn, nullable=False, default=list)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


__all__ = ["DialectProfile"]
