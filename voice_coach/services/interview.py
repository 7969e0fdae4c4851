"""Mock interview flow on top of the analysis pipeline."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from voice_coach.application.interfaces import InterviewStore, ProfileRepositoryInterface
from voice_coach.domain.interview import (
    InterviewCompleted,
    InterviewNotFound,
    pick_questions,
    record_answer,
)
from voice_coach.domain.models import (
    AnalysisInput,
    AnalysisResult,
    InterviewAnswer,
    InterviewCategory,
    InterviewRecord,
    SessionKind,
)
from voice_coach.pipelines.analysis import AnalysisPipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerOutcome:
    result: AnalysisResult
    interview: InterviewRecord


class InterviewService:
    """Starts interviews, scores spoken answers and reports the outcome.

    Answers are analysed as free practice sessions (no prompt), so each one
    also shows up in the learner's session history.
    """

    def __init__(
        self,
        store: InterviewStore,
        pipeline: AnalysisPipeline,
        profile_repository: ProfileRepositoryInterface,
        *,
        default_native_language: str = "hindi",
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._pipeline = pipeline
        self._profiles = profile_repository
        self._default_native_language = default_native_language
        self._rng = rng

    async def start(self, user_id: str, category: InterviewCategory) -> InterviewRecord:
        interview = await self._store.create(
            InterviewRecord(
                user_id=user_id,
                category=category,
                questions=pick_questions(category, rng=self._rng),
            )
        )
        logger.info(
            "Interview started id=%s user=%s category=%s",
            interview.id,
            user_id,
            category.value,
        )
        return interview

    async def get(self, user_id: str, interview_id: str) -> InterviewRecord:
        interview = await self._store.get(interview_id, user_id)
        if interview is None:
            raise InterviewNotFound(interview_id)
        return interview

    async def answer(
        self,
        user_id: str,
        interview_id: str,
        *,
        question_id: str,
        audio: bytes,
        duration_seconds: float,
    ) -> AnswerOutcome:
        interview = await self.get(user_id, interview_id)
        if interview.completed:
            raise InterviewCompleted("Interview is already completed")

        try:
            native_language = await self._profiles.get_native_language(user_id)
        except Exception as exc:
            logger.warning("Native language lookup failed user=%s: %s", user_id, exc)
            native_language = None

        result = await self._pipeline.run(
            AnalysisInput(
                audio=audio,
                duration_seconds=duration_seconds,
                session_kind=SessionKind.PRACTICE,
                user_id=user_id,
                native_language=native_language or self._default_native_language,
            )
        )

        progressed = record_answer(
            interview,
            InterviewAnswer(
                question_id=question_id,
                session_id=result.session_id,
                score=result.overall_score,
                transcript=result.transcript,
            ),
        )
        saved = await self._store.save_progress(progressed)
        logger.info(
            "Interview answer recorded id=%s question=%s score=%s complete=%s",
            interview_id,
            question_id,
            result.overall_score,
            saved.completed,
        )
        return AnswerOutcome(result=result, interview=saved)


__all__ = ["AnswerOutcome", "InterviewService"]
