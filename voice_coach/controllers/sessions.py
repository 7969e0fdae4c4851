"""Session analysis and history endpoints.

For a stage-by-stage map see ``voice_coach.pipelines.analysis.flow``.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError

from voice_coach.config.settings import settings
from voice_coach.controllers.dependencies import (
    CacheDep,
    CurrentUserIdDep,
    PipelineDep,
    ProfileRepositoryDep,
    SessionStoreDep,
)
from voice_coach.domain.errors import (
    INTERNAL_ERROR,
    STORAGE_FAILED,
    STT_FAILED,
    VALIDATION_ERROR,
    PipelineError,
)
from voice_coach.domain.models import AnalysisInput, SessionFilter, SessionKind
from voice_coach.services.cache import CacheKeys
from voice_coach.views import (
    AnalysisResultView,
    AnalyzeSessionResponse,
    SessionHistoryData,
    SessionHistoryResponse,
    SessionView,
)

router = APIRouter(prefix="/api", tags=["sessions"])

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 20
HISTORY_CACHE_TTL_SECONDS = 60

_PIPELINE_MESSAGES = {
    STORAGE_FAILED: "Audio storage failed. Please try again.",
    STT_FAILED: "Speech recognition failed. Please try again.",
}


def _parse_session_kind(raw: Optional[str]) -> SessionKind:
    try:
        return SessionKind((raw or "").strip().lower())
    except ValueError:
        return SessionKind.PRACTICE


def parse_duration(raw: Optional[str]) -> float:
    try:
        value = float(raw) if raw else 0.0
    except ValueError:
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return value


def validation_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": VALIDATION_ERROR, "message": message},
    )


def pipeline_http_error(exc: PipelineError, message: str) -> HTTPException:
    """502 for upstream storage/STT failures, 500 with ``message`` otherwise."""

    if exc.code in _PIPELINE_MESSAGES:
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": exc.code, "message": _PIPELINE_MESSAGES[exc.code]},
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"code": INTERNAL_ERROR, "message": message},
    )


@router.post("/session/analyze")
async def analyze_session(
    user_id: CurrentUserIdDep,
    pipeline: PipelineDep,
    profiles: ProfileRepositoryDep,
    cache: CacheDep,
    audio: Optional[UploadFile] = File(None),
    session_type: Optional[str] = Form(None, alias="type"),
    prompt_text: Optional[str] = Form(None, alias="promptText"),
    duration: Optional[str] = Form(None),
) -> AnalyzeSessionResponse:
    """Upload one recording and run it through the analysis pipeline."""

    if audio is None:
        raise validation_error("Audio file is required")

    audio_bytes = await audio.read()
    if not audio_bytes:
        raise validation_error("Audio file is required")
    if len(audio_bytes) > settings.max_audio_bytes:
        raise validation_error("Audio file exceeds 10MB limit")

    session_kind = _parse_session_kind(session_type)

    try:
        native_language = await profiles.get_native_language(user_id)
    except Exception as exc:
        logger.warning("Native language lookup failed user=%s: %s", user_id, exc)
        native_language = None

    try:
        request = AnalysisInput(
            audio=audio_bytes,
            duration_seconds=parse_duration(duration),
            session_kind=session_kind,
            prompt_text=prompt_text,
            user_id=user_id,
            native_language=native_language or settings.default_native_language,
        )
    except ValidationError as exc:
        raise validation_error(str(exc)) from exc

    try:
        result = await pipeline.run(request)
    except PipelineError as exc:
        logger.error("Session analyze failed user=%s: %s", user_id, exc)
        raise pipeline_http_error(exc, "Analysis failed unexpectedly") from exc
    except Exception as exc:
        logger.exception("Session analyze failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Analysis failed unexpectedly"},
        ) from exc

    await cache.delete(CacheKeys.session_history(user_id))
    await cache.delete(CacheKeys.session_history(user_id, session_kind.value))

    return AnalyzeSessionResponse(data=AnalysisResultView.from_result(result))


@router.get("/sessions/history")
async def session_history(
    user_id: CurrentUserIdDep,
    store: SessionStoreDep,
    cache: CacheDep,
    limit: int = Query(HISTORY_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session_kind: Optional[SessionKind] = Query(None, alias="type"),
) -> SessionHistoryResponse:
    """Paginated history, newest first. The default first page is cached briefly."""

    cache_key = CacheKeys.session_history(
        user_id, session_kind.value if session_kind else None
    )
    cacheable = offset == 0 and limit == HISTORY_PAGE_SIZE

    if cacheable:
        cached = await cache.get(cache_key)
        if cached is not None:
            try:
                return SessionHistoryResponse(data=SessionHistoryData.model_validate(cached))
            except ValidationError as exc:
                logger.warning("Discarding malformed cache entry key=%s: %s", cache_key, exc)

    try:
        page = await store.select(
            SessionFilter(
                user_id=user_id,
                session_kind=session_kind,
                limit=limit,
                offset=offset,
            )
        )
    except Exception as exc:
        logger.exception("Fetch session history failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Failed to fetch session history"},
        ) from exc

    data = SessionHistoryData(
        sessions=[SessionView.from_record(record) for record in page.sessions],
        total=page.total,
    )
    if cacheable:
        await cache.set(
            cache_key,
            data.model_dump(mode="json", by_alias=True),
            HISTORY_CACHE_TTL_SECONDS,
        )
    return SessionHistoryResponse(data=data)


__all__ = ["router"]
