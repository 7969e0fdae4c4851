from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

from voice_coach.domain.models import (
    DialectBaseline,
    DialectProfileRecord,
    InterviewRecord,
    MetricsRequest,
    ProfileRecord,
    SessionFilter,
    SessionPage,
    SessionRecord,
    SpeechMetrics,
    TipContext,
)


class AudioStore(ABC):
    """Blob storage for raw recordings"""

    @abstractmethod
    async def upload(self, data: bytes, path: str) -> None:
        ...

    @abstractmethod
    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        ...


class SessionStore(ABC):
    """Persistence contract for session records"""

    @abstractmethod
    async def insert(self, record: SessionRecord) -> SessionRecord:
        ...

    @abstractmethod
    async def insert_many(self, records: Sequence[SessionRecord]) -> list[SessionRecord]:
        """All records are written, or none are."""
        ...

    @abstractmethod
    async def update(
        self, session_id: str, fields: Mapping[str, Any]
    ) -> Optional[SessionRecord]:
        ...

    @abstractmethod
    async def select(self, query: SessionFilter) -> SessionPage:
        ...


class ProfileRepositoryInterface(ABC):
    """Persistence contract for user profiles and dialect baselines"""

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        ...

    @abstractmethod
    async def update_profile(
        self, user_id: str, fields: Mapping[str, Any]
    ) -> Optional[ProfileRecord]:
        """Returns ``None`` when the profile does not exist."""
        ...

    @abstractmethod
    async def get_native_language(self, user_id: str) -> Optional[str]:
        ...

    @abstractmethod
    async def get_dialect_profile(self, user_id: str) -> Optional[DialectProfileRecord]:
        ...

    @abstractmethod
    async def upsert_dialect_profile(
        self,
        user_id: str,
        baseline: DialectBaseline,
        session_ids: list[str],
    ) -> None:
        ...

    @abstractmethod
    async def mark_onboarding_complete(self, user_id: str) -> None:
        ...


class SpeechTranscriber(ABC):
    """Speech-to-text; raises ``TranscriptionError`` once its retries are spent"""

    @abstractmethod
    async def transcribe(self, audio: bytes, filename_hint: str) -> str:
        ...


class TipGenerator(ABC):
    """Produces short coaching sentences for a session"""

    @abstractmethod
    async def generate_tips(self, context: TipContext) -> list[str]:
        ...


class MetricsAnalyzer(ABC):
    """Computes pace, filler and accuracy metrics for a transcript"""

    @abstractmethod
    async def analyze(self, request: MetricsRequest) -> SpeechMetrics:
        ...


class Cache(ABC):
    """Best-effort key/value accelerator; implementations never raise"""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int = 300) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...


class InterviewStore(ABC):
    """Persistence contract for mock interviews"""

    @abstractmethod
    async def create(self, interview: InterviewRecord) -> InterviewRecord:
        ...

    @abstractmethod
    async def get(self, interview_id: str, user_id: str) -> Optional[InterviewRecord]:
        """Only returns interviews owned by ``user_id``."""
        ...

    @abstractmethod
    async def save_progress(self, interview: InterviewRecord) -> InterviewRecord:
        ...
