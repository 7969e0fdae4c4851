"""SQLAlchemy model for mock interviews."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from .base import Base
from .session import JsonColumn


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    category = Column(String(20), nullable=False)
    questions = Column(JsonColumn, nullable=False, default=list)
    answers = Column(JsonColumn, nullable=False, default=list)
    current_question_index = Column(Integer, nullable=False, default=0)
    overall_score = Column(Integer, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


__all__ = ["InterviewSession"]
