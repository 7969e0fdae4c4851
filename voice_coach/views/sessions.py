"""Response schemas for session analysis and history."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from voice_coach.domain.models import AnalysisResult, SessionKind, SessionRecord


class AnalysisResultView(BaseModel):
    """Analysis result as the mobile client expects it (camelCase)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    transcript: str
    wpm: float
    accuracy_score: Optional[int]
    filler_count: int
    filler_words_found: list[str]
    tips: list[str]
    overall_score: int
    audio_url: str

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultView":
        return cls(**result.model_dump())


class AnalyzeSessionResponse(BaseModel):
    success: bool = True
    data: AnalysisResultView


class SessionView(BaseModel):
    """One row of session history, keyed like the ``sessions`` table."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str
    session_kind: SessionKind = Field(alias="type")
    prompt_text: Optional[str] = None
    transcript: Optional[str] = None
    wpm: Optional[float] = None
    accuracy_score: Optional[int] = None
    filler_count: int = 0
    filler_words_found: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list, alias="llm_tips")
    audio_url: Optional[str] = None
    duration_seconds: Optional[float] = Field(default=None, alias="duration_secs")
    overall_score: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionView":
        return cls.model_validate(record.model_dump())


class SessionHistoryData(BaseModel):
    sessions: list[SessionView]
    total: int


class SessionHistoryResponse(BaseModel):
    success: bool = True
    data: SessionHistoryData
