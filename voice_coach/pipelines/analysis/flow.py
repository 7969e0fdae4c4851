"""Orchestration of the session analysis pipeline.

Stages run strictly in order and share no mutable state between runs:

1. ``storage`` - upload the recording and sign a 7-day URL (fatal).
2. ``transcription`` - speech to text (fatal).
3. ``metrics`` - remote analyzer, local fallback (recoverable).
4. ``tips`` - LLM coaching tips, fixed fallback (recoverable).
5. ``scoring`` - overall score from pace, fillers and accuracy.
6. ``persistence`` - one session insert (fatal).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from voice_coach.application.interfaces import (
    AudioStore,
    MetricsAnalyzer,
    SessionStore,
    SpeechTranscriber,
    TipGenerator,
)
from voice_coach.domain.errors import PipelineError
from voice_coach.domain.metrics import LocalMetricsAnalyzer
from voice_coach.domain.models import (
    AnalysisInput,
    AnalysisResult,
    MetricsRequest,
    SessionRecord,
    TipContext,
)
from voice_coach.domain.scoring import compute_overall_score
from voice_coach.services.retry import RetryPolicy
from voice_coach.telemetry import record_fallback, record_pipeline_run

from .metrics import measure_speech
from .persistence import save_session
from .storage import recording_path, store_recording
from .tips import coaching_tips
from .transcription import transcribe_recording

logger = logging.getLogger(__name__)

SIGNED_URL_TTL_SECONDS = 60 * 60 * 24 * 7


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage."""

    order: int
    name: str
    module: str
    fatal: bool


class AnalysisPipeline:
    """Runs one recording through storage, STT, metrics, tips, scoring and persistence."""

    _STAGES = (
        PipelineStage(1, "Storage", "voice_coach.pipelines.analysis.storage", True),
        PipelineStage(2, "Transcription", "voice_coach.pipelines.analysis.transcription", True),
        PipelineStage(3, "Metrics", "voice_coach.pipelines.analysis.metrics", False),
        PipelineStage(4, "Tips", "voice_coach.pipelines.analysis.tips", False),
        PipelineStage(5, "Scoring", "voice_coach.domain.scoring", False),
        PipelineStage(6, "Persistence", "voice_coach.pipelines.analysis.persistence", True),
    )

    def __init__(
        self,
        *,
        audio_store: AudioStore,
        transcriber: SpeechTranscriber,
        tip_generator: TipGenerator,
        session_store: SessionStore,
        remote_metrics: Optional[MetricsAnalyzer] = None,
        local_metrics: Optional[MetricsAnalyzer] = None,
        storage_retry: Optional[RetryPolicy] = None,
        tips_retry: Optional[RetryPolicy] = None,
        metrics_timeout_seconds: float = 15.0,
        signed_url_ttl_seconds: int = SIGNED_URL_TTL_SECONDS,
        default_native_language: str = "hindi",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._audio_store = audio_store
        self._transcriber = transcriber
        self._tip_generator = tip_generator
        self._session_store = session_store
        self._remote_metrics = remote_metrics
        self._local_metrics = local_metrics or LocalMetricsAnalyzer()
        self._storage_retry = storage_retry or RetryPolicy(3, 0.5, 2.0)
        self._tips_retry = tips_retry or RetryPolicy(2, 0.0, 1.0)
        self._metrics_timeout = metrics_timeout_seconds
        self._url_ttl = signed_url_ttl_seconds
        self._default_native_language = default_native_language
        self._clock = clock

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        return tuple(cls._STAGES)

    async def run(self, data: AnalysisInput) -> AnalysisResult:
        try:
            result = await self._run(data)
        except PipelineError as exc:
            record_pipeline_run(exc.code)
            raise
        record_pipeline_run("success")
        return result

    async def _run(self, data: AnalysisInput) -> AnalysisResult:
        path = recording_path(data.user_id, int(self._clock() * 1000))
        logger.info(
            "Analysis started user=%s kind=%s bytes=%s",
            data.user_id,
            data.session_kind.value,
            len(data.audio),
        )

        stored = await store_recording(
            self._audio_store,
            data.audio,
            path,
            retry_policy=self._storage_retry,
            url_ttl_seconds=self._url_ttl,
        )

        transcript = await transcribe_recording(self._transcriber, data.audio, path)

        metrics_outcome = await measure_speech(
            MetricsRequest(
                transcript=transcript,
                duration_seconds=data.duration_seconds,
                prompt_text=data.prompt_text,
                session_kind=data.session_kind,
            ),
            remote=self._remote_metrics,
            local=self._local_metrics,
            timeout_seconds=self._metrics_timeout,
        )
        if metrics_outcome.fallback_used:
            record_fallback("metrics")
        metrics = metrics_outcome.value

        tips_outcome = await coaching_tips(
            self._tip_generator,
            TipContext(
                transcript=transcript,
                wpm=metrics.wpm,
                filler_words_found=metrics.filler_words_found,
                filler_count=metrics.filler_count,
                accuracy_score=metrics.accuracy_score,
                session_kind=data.session_kind,
                native_language=data.native_language or self._default_native_language,
                prompt_text=data.prompt_text,
            ),
            retry_policy=self._tips_retry,
        )
        if tips_outcome.fallback_used:
            record_fallback("tips")

        overall_score = compute_overall_score(
            metrics.wpm, metrics.filler_count, metrics.accuracy_score
        )

        saved = await save_session(
            self._session_store,
            SessionRecord(
                user_id=data.user_id,
                session_kind=data.session_kind,
                prompt_text=data.prompt_text,
                transcript=transcript,
                wpm=metrics.wpm,
                accuracy_score=metrics.accuracy_score,
                filler_count=metrics.filler_count,
                filler_words_found=metrics.filler_words_found,
                tips=tips_outcome.value,
                audio_url=stored.signed_url,
                duration_seconds=data.duration_seconds,
                overall_score=overall_score,
            ),
        )

        logger.info(
            "Analysis complete session=%s score=%s metrics_fallback=%s tips_fallback=%s",
            saved.id,
            overall_score,
            metrics_outcome.fallback_used,
            tips_outcome.fallback_used,
        )
        return AnalysisResult(
            session_id=saved.id,
            transcript=transcript,
            wpm=metrics.wpm,
            accuracy_score=metrics.accuracy_score,
            filler_count=metrics.filler_count,
            filler_words_found=metrics.filler_words_found,
            tips=tips_outcome.value,
            overall_score=overall_score,
            audio_url=stored.signed_url,
        )


__all__ = ["AnalysisPipeline", "PipelineStage"]
