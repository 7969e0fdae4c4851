from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionKind(str, Enum):
    PRACTICE = "practice"
    DRILL = "drill"
    SHADOW = "shadow"
    ONBOARDING = "onboarding"


class AnalysisInput(BaseModel):
    """One submitted recording, built by the HTTP layer per request."""

    model_config = ConfigDict(frozen=True)

    audio: bytes = Field(min_length=1)
    duration_seconds: float = Field(default=0.0, ge=0.0)
    session_kind: SessionKind = SessionKind.PRACTICE
    prompt_text: Optional[str] = None
    user_id: str
    native_language: Optional[str] = None

    @field_validator("prompt_text")
    @classmethod
    def blank_prompt_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class MetricsRequest(BaseModel):
    """Input shared by the remote and local metrics analyzers."""

    model_config = ConfigDict(frozen=True)

    transcript: str
    duration_seconds: float = Field(ge=0.0)
    prompt_text: Optional[str] = None
    session_kind: SessionKind


class SpeechMetrics(BaseModel):
    """Pace, filler and accuracy figures for one transcript."""

    model_config = ConfigDict(frozen=True)

    wpm: float = Field(ge=0.0)
    filler_count: int = Field(ge=0)
    filler_words_found: list[str] = Field(default_factory=list)
    accuracy_score: Optional[int] = Field(default=None, ge=0, le=100)


class TipContext(BaseModel):
    """Everything the tip generator is allowed to see about a session."""

    model_config = ConfigDict(frozen=True)

    transcript: str
    wpm: float
    filler_words_found: list[str]
    filler_count: int
    accuracy_score: Optional[int]
    session_kind: SessionKind
    native_language: str
    prompt_text: Optional[str] = None


class SessionRecord(BaseModel):
    """Domain model for a persisted session row."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: str
    session_kind: SessionKind
    prompt_text: Optional[str] = None
    transcript: Optional[str] = None
    wpm: Optional[float] = None
    accuracy_score: Optional[int] = None
    filler_count: int = 0
    filler_words_found: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    audio_url: Optional[str] = None
    duration_seconds: Optional[float] = None
    overall_score: Optional[int] = None
    created_at: Optional[datetime] = None


class SessionFilter(BaseModel):
    """Query for a user's session history, newest first."""

    user_id: str
    session_kind: Optional[SessionKind] = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class SessionPage(BaseModel):
    sessions: list[SessionRecord]
    total: int


class AnalysisResult(BaseModel):
    """Final, immutable outcome of one pipeline run."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    transcript: str
    wpm: float
    accuracy_score: Optional[int]
    filler_count: int
    filler_words_found: list[str]
    tips: list[str] = Field(min_length=1, max_length=3)
    overall_score: int = Field(ge=0, le=100)
    audio_url: str


class DialectBaseline(BaseModel):
    """Baseline voice profile derived from onboarding seed recordings."""

    model_config = ConfigDict(frozen=True)

    detected_region: str
    avg_wpm_baseline: float
    filler_patterns: dict[str, int] = Field(default_factory=dict)
    weak_phonemes: list[dict[str, str]] = Field(default_factory=list)


class ProfileRecord(BaseModel):
    """Learner profile row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    native_language: Optional[str] = None
    target_language: Optional[str] = None
    daily_goal_mins: int = 10
    streak_days: int = 0
    last_active_date: Optional[date] = None
    onboarding_complete: bool = False
    created_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Editable profile fields; unset fields are left untouched."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    native_language: Optional[str] = None
    target_language: Optional[str] = None
    daily_goal_mins: Optional[int] = Field(default=None, ge=1, le=120)

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class DialectProfileRecord(BaseModel):
    """Stored dialect baseline for one learner."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    detected_region: Optional[str] = None
    weak_phonemes: list[dict[str, str]] = Field(default_factory=list)
    filler_patterns: dict[str, int] = Field(default_factory=dict)
    avg_wpm_baseline: Optional[float] = None
    onboarding_session_ids: list[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = None


class DrillSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    sentences: list[str]
    target_phonemes: list[str]


class InterviewCategory(str, Enum):
    HR = "hr"
    TECHNICAL = "technical"
    SITUATIONAL = "situational"


class InterviewQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    category: InterviewCategory


class InterviewAnswer(BaseModel):
    """One answered question; stored inside the interview row."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    session_id: str
    score: int
    transcript: str


class InterviewRecord(BaseModel):
    """A mock interview: a fixed question list answered one by one."""

    id: Optional[str] = None
    user_id: str
    category: InterviewCategory
    questions: list[InterviewQuestion]
    answers: list[InterviewAnswer] = Field(default_factory=list)
    current_question_index: int = Field(default=0, ge=0)
    overall_score: Optional[int] = None
    completed: bool = False
    created_at: Optional[datetime] = None
