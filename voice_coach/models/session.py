"""SQLAlchemy model for analysed speaking sessions."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base

JsonColumn = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


class PracticeSession(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    # Column keeps the public name "type"; the attribute avoids the builtin.
    session_kind = Column("type", String(20), nullable=False, index=True)
    prompt_text = Column(Text, nullable=True)
    transcript = Column(Text, nullable=True)
    wpm = Column(Float, nullable=True)
    accuracy_score = Column(Integer, nullable=True)
    filler_count = Column(Integer, nullable=False, default=0)
    filler_words_found = Column(JsonColumn, nullable=False, default=list)
    tips = Column(JsonColumn, nullable=False, default=list)
    audio_url = Column(Text, nullable=True)
    duration_seconds = Column(Float, nullable=True)
    overall_score = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)


__all__ = ["PracticeSession", "JsonColumn"]
