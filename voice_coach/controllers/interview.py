"""Mock interview endpoints: start, answer and report."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from voice_coach.config.settings import settings
from voice_coach.controllers.dependencies import CacheDep, CurrentUserIdDep, InterviewServiceDep
from voice_coach.controllers.sessions import parse_duration, pipeline_http_error, validation_error
from voice_coach.domain.errors import INTERNAL_ERROR, NOT_FOUND, PipelineError
from voice_coach.domain.interview import InterviewCompleted, InterviewNotFound
from voice_coach.domain.models import SessionKind
from voice_coach.services.cache import CacheKeys
from voice_coach.views import (
    AnswerResultView,
    InterviewAnswerData,
    InterviewAnswerResponse,
    InterviewReportResponse,
    InterviewReportView,
    QuestionView,
    StartInterviewData,
    StartInterviewRequest,
    StartInterviewResponse,
)

router = APIRouter(prefix="/api/interview", tags=["interview"])

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": NOT_FOUND, "message": "Interview session not found"},
    )


@router.post("/start")
async def start_interview(
    body: StartInterviewRequest,
    user_id: CurrentUserIdDep,
    service: InterviewServiceDep,
) -> StartInterviewResponse:
    try:
        interview = await service.start(user_id, body.category)
    except Exception as exc:
        logger.exception("Start interview failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Failed to start interview"},
        ) from exc

    return StartInterviewResponse(
        data=StartInterviewData(
            interview_id=interview.id,
            first_question=QuestionView.at(interview, 0),
        )
    )


@router.post("/{interview_id}/answer")
async def answer_question(
    interview_id: str,
    user_id: CurrentUserIdDep,
    service: InterviewServiceDep,
    cache: CacheDep,
    audio: Optional[UploadFile] = File(None),
    question_id: Optional[str] = Form(None, alias="questionId"),
    duration: Optional[str] = Form(None),
) -> InterviewAnswerResponse:
    """Score one spoken answer and move on to the next question."""

    audio_bytes = await audio.read() if audio is not None else b""
    if not audio_bytes or not question_id:
        raise validation_error("audio and questionId are required")
    if len(audio_bytes) > settings.max_audio_bytes:
        raise validation_error("Audio file exceeds 10MB limit")

    try:
        outcome = await service.answer(
            user_id,
            interview_id,
            question_id=question_id,
            audio=audio_bytes,
            duration_seconds=parse_duration(duration),
        )
    except InterviewNotFound as exc:
        raise _not_found() from exc
    except InterviewCompleted as exc:
        raise validation_error("Interview is already completed") from exc
    except PipelineError as exc:
        logger.error("Interview answer failed user=%s interview=%s: %s", user_id, interview_id, exc)
        raise pipeline_http_error(exc, "Answer analysis failed") from exc
    except Exception as exc:
        logger.exception("Interview answer failed user=%s interview=%s", user_id, interview_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Answer analysis failed"},
        ) from exc

    await cache.delete(CacheKeys.session_history(user_id))
    await cache.delete(CacheKeys.session_history(user_id, SessionKind.PRACTICE.value))

    interview = outcome.interview
    return InterviewAnswerResponse(
        data=InterviewAnswerData(
            answer_result=AnswerResultView.from_result(outcome.result),
            next_question=QuestionView.at(interview, interview.current_question_index),
            is_complete=interview.completed,
            overall_score=interview.overall_score,
        )
    )


@router.get("/{interview_id}/report")
async def interview_report(
    interview_id: str,
    user_id: CurrentUserIdDep,
    service: InterviewServiceDep,
) -> InterviewReportResponse:
    try:
        interview = await service.get(user_id, interview_id)
    except InterviewNotFound as exc:
        raise _not_found() from exc
    except Exception as exc:
        logger.exception("Interview report failed user=%s interview=%s", user_id, interview_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Failed to fetch interview report"},
        ) from exc

    return InterviewReportResponse(data=InterviewReportView.from_record(interview))


__all__ = ["router"]
