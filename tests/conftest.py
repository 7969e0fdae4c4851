"""Shared fakes for the pipeline, services and HTTP tests."""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional

import pytest

from voice_coach.application.interfaces import (
    AudioStore,
    Cache,
    InterviewStore,
    MetricsAnalyzer,
    ProfileRepositoryInterface,
    SessionStore,
    SpeechTranscriber,
    TipGenerator,
)
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
from voice_coach.pipelines.analysis import AnalysisPipeline
from voice_coach.services.retry import RetryPolicy
from voice_coach.services.storage import StorageError
from voice_coach.services.transcribe import TranscriptionError


class FakeAudioStore(AudioStore):
    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.uploads: list[tuple[str, bytes]] = []
        self.upload_attempts = 0

    async def upload(self, data: bytes, path: str) -> None:
        self.upload_attempts += 1
        if self.upload_attempts <= self.failures:
            raise StorageError("S3 is down")
        self.uploads.append((path, data))

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        return f"https://recordings.example.com/{path}?ttl={ttl_seconds}"


class FakeTranscriber(SpeechTranscriber):
    def __init__(self, transcript: str = "", error: Exception | None = None) -> None:
        self.transcript = transcript
        self.error = error
        self.calls: list[str] = []

    async def transcribe(self, audio: bytes, filename_hint: str) -> str:
        self.calls.append(filename_hint)
        if self.error is not None:
            raise self.error
        return self.transcript


class ScriptedTranscriber(SpeechTranscriber):
    """Returns transcripts (or raises) per filename."""

    def __init__(self, script: Mapping[str, Any]) -> None:
        self.script = dict(script)

    async def transcribe(self, audio: bytes, filename_hint: str) -> str:
        outcome = self.script[filename_hint]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeTipGenerator(TipGenerator):
    """Replays the given responses; exceptions are raised."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses) or [["Great pace!", "Try pausing instead of 'um'."]]
        self.contexts: list[TipContext] = []

    async def generate_tips(self, context: TipContext) -> list[str]:
        self.contexts.append(context)
        response = self.responses[min(len(self.contexts), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return list(response)


class FakeMetricsAnalyzer(MetricsAnalyzer):
    def __init__(
        self,
        metrics: SpeechMetrics | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.metrics = metrics
        self.error = error
        self.delay = delay
        self.requests: list[MetricsRequest] = []

    async def analyze(self, request: MetricsRequest) -> SpeechMetrics:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        assert self.metrics is not None
        return self.metrics


class FakeSessionStore(SessionStore):
    """In-memory store; ``fail_at`` makes the n-th written record fail."""

    def __init__(self, fail: bool = False, fail_at: Optional[int] = None) -> None:
        self.fail = fail
        self.fail_at = fail_at
        self.records: dict[str, SessionRecord] = {}
        self.inserted: list[SessionRecord] = []
        self.writes = 0

    def _prepare(self, record: SessionRecord) -> SessionRecord:
        self.writes += 1
        if self.fail or self.writes == self.fail_at:
            raise RuntimeError("database unavailable")
        return record.model_copy(
            update={
                "id": record.id or str(uuid.uuid4()),
                "created_at": record.created_at or datetime.utcnow(),
            }
        )

    def _commit(self, saved: list[SessionRecord]) -> None:
        for record in saved:
            self.records[record.id] = record
            self.inserted.append(record)

    async def insert(self, record: SessionRecord) -> SessionRecord:
        saved = self._prepare(record)
        self._commit([saved])
        return saved

    async def insert_many(self, records) -> list[SessionRecord]:
        saved = [self._prepare(record) for record in records]
        self._commit(saved)
        return saved

    async def update(
        self, session_id: str, fields: Mapping[str, Any]
    ) -> Optional[SessionRecord]:
        if session_id not in self.records:
            return None
        updated = self.records[session_id].model_copy(update=dict(fields))
        self.records[session_id] = updated
        return updated

    async def select(self, query: SessionFilter) -> SessionPage:
        rows = [
            record
            for record in self.records.values()
            if record.user_id == query.user_id
            and (query.session_kind is None or record.session_kind == query.session_kind)
        ]
        rows.sort(key=lambda record: record.created_at, reverse=True)
        return SessionPage(
            sessions=rows[query.offset : query.offset + query.limit],
            total=len(rows),
        )


class FakeProfileRepository(ProfileRepositoryInterface):
    def __init__(
        self,
        native_language: Optional[str] = None,
        profiles: Optional[list[ProfileRecord]] = None,
        fail: bool = False,
    ) -> None:
        self.native_language = native_language
        self.profiles = {profile.id: profile for profile in profiles or []}
        self.fail = fail
        self.dialect_profiles: dict[str, tuple[DialectBaseline, list[str]]] = {}
        self.dialect_records: dict[str, DialectProfileRecord] = {}
        self.completed: set[str] = set()
        self.reads: list[str] = []

    async def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        self.reads.append(f"profile:{user_id}")
        if self.fail:
            raise RuntimeError("database unavailable")
        return self.profiles.get(user_id)

    async def update_profile(
        self, user_id: str, fields: Mapping[str, Any]
    ) -> Optional[ProfileRecord]:
        if self.fail:
            raise RuntimeError("database unavailable")
        if user_id not in self.profiles:
            return None
        updated = self.profiles[user_id].model_copy(update=dict(fields))
        self.profiles[user_id] = updated
        return updated

    async def get_native_language(self, user_id: str) -> Optional[str]:
        if self.fail:
            raise RuntimeError("database unavailable")
        return self.native_language

    async def get_dialect_profile(self, user_id: str) -> Optional[DialectProfileRecord]:
        self.reads.append(f"dialect:{user_id}")
        if self.fail:
            raise RuntimeError("database unavailable")
        return self.dialect_records.get(user_id)

    async def upsert_dialect_profile(
        self,
        user_id: str,
        baseline: DialectBaseline,
        session_ids: list[str],
    ) -> None:
        self.dialect_profiles[user_id] = (baseline, list(session_ids))
        self.dialect_records[user_id] = DialectProfileRecord(
            id=f"dialect-{user_id}",
            user_id=user_id,
            onboarding_session_ids=list(session_ids),
            **baseline.model_dump(),
        )

    async def mark_onboarding_complete(self, user_id: str) -> None:
        self.completed.add(user_id)


class FakeInterviewStore(InterviewStore):
    def __init__(self) -> None:
        self.interviews: dict[str, InterviewRecord] = {}
        self.saves = 0

    async def create(self, interview: InterviewRecord) -> InterviewRecord:
        saved = interview.model_copy(
            update={"id": str(uuid.uuid4()), "created_at": datetime.utcnow()}
        )
        self.interviews[saved.id] = saved
        return saved

    async def get(self, interview_id: str, user_id: str) -> Optional[InterviewRecord]:
        interview = self.interviews.get(interview_id)
        if interview is None or interview.user_id != user_id:
            return None
        return interview

    async def save_progress(self, interview: InterviewRecord) -> InterviewRecord:
        if interview.id not in self.interviews:
            raise LookupError(f"Interview {interview.id} does not exist")
        self.saves += 1
        self.interviews[interview.id] = interview
        return interview


class FakeCache(Cache):
    def __init__(self) -> None:
        self.values: dict[str, Any] = {}
        self.deleted: list[str] = []
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> Any | None:
        return self.values.get(key)

    async def set(self, key: str, value: Any, ttl_seconds: int = 300) -> None:
        self.values[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self.deleted.append(key)
        self.values.pop(key, None)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def build_pipeline(
    *,
    audio_store: AudioStore | None = None,
    transcriber: SpeechTranscriber | None = None,
    tip_generator: TipGenerator | None = None,
    session_store: SessionStore | None = None,
    remote_metrics: MetricsAnalyzer | None = None,
    sleep: RecordingSleep | None = None,
    metrics_timeout_seconds: float = 15.0,
) -> AnalysisPipeline:
    sleep = sleep or RecordingSleep()
    return AnalysisPipeline(
        audio_store=audio_store or FakeAudioStore(),
        transcriber=transcriber or FakeTranscriber("I am ready"),
        tip_generator=tip_generator or FakeTipGenerator(),
        session_store=session_store or FakeSessionStore(),
        remote_metrics=remote_metrics,
        storage_retry=RetryPolicy(3, 0.5, 2.0, sleep=sleep),
        tips_retry=RetryPolicy(2, 0.0, 1.0, sleep=sleep),
        metrics_timeout_seconds=metrics_timeout_seconds,
        clock=lambda: 1_700_000_000.5,
    )


@pytest.fixture
def audio_store() -> FakeAudioStore:
    return FakeAudioStore()


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def profiles() -> FakeProfileRepository:
    return FakeProfileRepository()


__all__ = [
    "FakeAudioStore",
    "FakeCache",
    "FakeInterviewStore",
    "FakeMetricsAnalyzer",
    "FakeProfileRepository",
    "FakeSessionStore",
    "FakeTipGenerator",
    "FakeTranscriber",
    "RecordingSleep",
    "ScriptedTranscriber",
    "TranscriptionError",
    "build_pipeline",
]
