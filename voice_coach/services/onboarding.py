"""Dialect profile seeding from onboarding recordings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from voice_coach.application.interfaces import (
    ProfileRepositoryInterface,
    SessionStore,
    SpeechTranscriber,
)
from voice_coach.domain.errors import SttFailed
from voice_coach.domain.metrics import count_fillers
from voice_coach.domain.models import DialectBaseline, SessionKind, SessionRecord
from voice_coach.domain.onboarding import SeedSample, build_dialect_baseline, estimate_duration

logger = logging.getLogger(__name__)

SEED_FIELDS = tuple(f"seed_{index}" for index in range(5))


@dataclass(frozen=True)
class SeedRecording:
    field_name: str
    filename: str
    audio: bytes


@dataclass(frozen=True)
class OnboardingOutcome:
    baseline: DialectBaseline
    session_ids: list[str]


class OnboardingService:
    """Transcribes seed clips, stores them as onboarding sessions and saves the baseline."""

    def __init__(
        self,
        transcriber: SpeechTranscriber,
        session_store: SessionStore,
        profile_repository: ProfileRepositoryInterface,
    ) -> None:
        self._transcriber = transcriber
        self._session_store = session_store
        self._profiles = profile_repository

    async def analyze(
        self,
        user_id: str,
        seeds: Sequence[SeedRecording],
        native_language: Optional[str],
    ) -> OnboardingOutcome:
        samples: list[SeedSample] = []
        for seed in seeds:
            try:
                transcript = await self._transcriber.transcribe(seed.audio, seed.filename)
            except Exception as exc:
                logger.warning("STT failed for seed %s, skipping: %s", seed.field_name, exc)
                continue
            samples.append(SeedSample(transcript, estimate_duration(len(seed.audio))))

        if not samples:
            raise SttFailed("Speech recognition failed for all seed recordings")

        baseline = build_dialect_baseline(samples, native_language)

        records: list[SessionRecord] = []
        for sample in samples:
            fillers = count_fillers(sample.transcript)
            records.append(
                SessionRecord(
                    user_id=user_id,
                    session_kind=SessionKind.ONBOARDING,
                    transcript=sample.transcript,
                    wpm=sample.wpm,
                    filler_count=sum(fillers.values()),
                    filler_words_found=list(fillers),
                    duration_seconds=sample.duration_seconds,
                )
            )
        saved = await self._session_store.insert_many(records)
        session_ids = [record.id for record in saved]

        await self._profiles.upsert_dialect_profile(user_id, baseline, session_ids)
        await self._profiles.mark_onboarding_complete(user_id)

        logger.info(
            "Onboarding complete user=%s seeds=%s/%s region=%s",
            user_id,
            len(samples),
            len(seeds),
            baseline.detected_region,
        )
        return OnboardingOutcome(baseline=baseline, session_ids=session_ids)


__all__ = ["OnboardingOutcome", "OnboardingService", "SeedRecording", "SEED_FIELDS"]
