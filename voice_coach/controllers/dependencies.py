"""Common FastAPI dependencies reused across controllers.

Collaborators are built once, on first use, so importing the app never
opens network clients.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from voice_coach.application.interfaces import (
    Cache,
    InterviewStore,
    ProfileRepositoryInterface,
    SessionStore,
    SpeechTranscriber,
)
from voice_coach.config.settings import settings
from voice_coach.database import SessionFactory
from voice_coach.pipelines.analysis import AnalysisPipeline
from voice_coach.services.cache import get_cache
from voice_coach.services.interview import InterviewService
from voice_coach.services.interview_store import SqlAlchemyInterviewStore
from voice_coach.services.metrics_client import RemoteMetricsAnalyzer
from voice_coach.services.onboarding import OnboardingService
from voice_coach.services.profile_repository import SqlAlchemyProfileRepository
from voice_coach.services.retry import RetryPolicy
from voice_coach.services.session_store import SqlAlchemySessionStore
from voice_coach.services.storage import S3AudioStore
from voice_coach.services.tip_generator import BedrockTipGenerator
from voice_coach.services.transcribe import build_transcribe_service
from voice_coach.utils import AuthenticationError, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
) -> str:
    """Resolve the user id (``sub``) from the bearer token."""

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    try:
        return decode_access_token(credentials.credentials).sub
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from None


@lru_cache
def get_session_store() -> SessionStore:
    return SqlAlchemySessionStore(SessionFactory)


@lru_cache
def get_profile_repository() -> ProfileRepositoryInterface:
    return SqlAlchemyProfileRepository(SessionFactory)


@lru_cache
def get_transcriber() -> SpeechTranscriber:
    return build_transcribe_service()


@lru_cache
def get_analysis_pipeline() -> AnalysisPipeline:
    return AnalysisPipeline(
        audio_store=S3AudioStore(),
        transcriber=get_transcriber(),
        tip_generator=BedrockTipGenerator(),
        session_store=get_session_store(),
        remote_metrics=RemoteMetricsAnalyzer(),
        storage_retry=RetryPolicy(
            max_attempts=settings.s3.upload_max_attempts,
            base_delay=settings.s3.upload_base_delay,
            backoff_multiplier=settings.s3.upload_backoff,
        ),
        tips_retry=RetryPolicy(
            max_attempts=settings.bedrock.max_attempts,
            base_delay=0.0,
        ),
        metrics_timeout_seconds=settings.analyzer.timeout_seconds,
        signed_url_ttl_seconds=settings.s3.signed_url_ttl_seconds,
        default_native_language=settings.default_native_language,
    )


def get_onboarding_service(
    transcriber: Annotated[SpeechTranscriber, Depends(get_transcriber)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
    profiles: Annotated[ProfileRepositoryInterface, Depends(get_profile_repository)],
) -> OnboardingService:
    return OnboardingService(transcriber, session_store, profiles)


@lru_cache
def get_interview_store() -> InterviewStore:
    return SqlAlchemyInterviewStore(SessionFactory)


def get_interview_service(
    store: Annotated[InterviewStore, Depends(get_interview_store)],
    pipeline: Annotated[AnalysisPipeline, Depends(get_analysis_pipeline)],
    profiles: Annotated[ProfileRepositoryInterface, Depends(get_profile_repository)],
) -> InterviewService:
    return InterviewService(
        store,
        pipeline,
        profiles,
        default_native_language=settings.default_native_language,
    )


def get_cache_dependency() -> Cache:
    return get_cache()


CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
PipelineDep = Annotated[AnalysisPipeline, Depends(get_analysis_pipeline)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
ProfileRepositoryDep = Annotated[ProfileRepositoryInterface, Depends(get_profile_repository)]
OnboardingServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]
InterviewServiceDep = Annotated[InterviewService, Depends(get_interview_service)]
CacheDep = Annotated[Cache, Depends(get_cache_dependency)]


__all__ = [
    "CacheDep",
    "CurrentUserIdDep",
    "InterviewServiceDep",
    "OnboardingServiceDep",
    "PipelineDep",
    "ProfileRepositoryDep",
    "SessionStoreDep",
    "bearer_scheme",
    "get_analysis_pipeline",
    "get_cache_dependency",
    "get_current_user_id",
    "get_interview_service",
    "get_interview_store",
    "get_onboarding_service",
    "get_profile_repository",
    "get_session_store",
    "get_transcriber",
]
