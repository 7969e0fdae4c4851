"""Onboarding endpoint: builds the learner's dialect baseline."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from voice_coach.config.settings import settings
from voice_coach.controllers.dependencies import (
    CacheDep,
    CurrentUserIdDep,
    OnboardingServiceDep,
)
from voice_coach.domain.errors import INTERNAL_ERROR, VALIDATION_ERROR, SttFailed
from voice_coach.domain.models import SessionKind
from voice_coach.services.cache import CacheKeys
from voice_coach.services.onboarding import SEED_FIELDS, SeedRecording
from voice_coach.views import DialectProfileView, OnboardingData, OnboardingResponse

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])

logger = logging.getLogger(__name__)


@router.post("/analyze")
async def analyze_onboarding(
    user_id: CurrentUserIdDep,
    service: OnboardingServiceDep,
    cache: CacheDep,
    seed_0: Optional[UploadFile] = File(None),
    seed_1: Optional[UploadFile] = File(None),
    seed_2: Optional[UploadFile] = File(None),
    seed_3: Optional[UploadFile] = File(None),
    seed_4: Optional[UploadFile] = File(None),
    native_language: Optional[str] = Form(None, alias="nativeLanguage"),
) -> OnboardingResponse:
    uploads = dict(zip(SEED_FIELDS, (seed_0, seed_1, seed_2, seed_3, seed_4)))

    seeds: list[SeedRecording] = []
    for field_name, upload in uploads.items():
        if upload is None:
            continue
        audio = await upload.read()
        if not audio:
            continue
        if len(audio) > settings.max_audio_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": VALIDATION_ERROR,
                    "message": f"{field_name} exceeds 10MB limit",
                },
            )
        seeds.append(SeedRecording(field_name, upload.filename or f"{field_name}.m4a", audio))

    if not seeds:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": VALIDATION_ERROR,
                "message": "At least one seed audio file (seed_0..seed_4) is required",
            },
        )

    try:
        outcome = await service.analyze(
            user_id,
            seeds,
            native_language or settings.default_native_language,
        )
    except SttFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": exc.code, "message": exc.message},
        ) from exc
    except Exception as exc:
        logger.exception("Onboarding analyze failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Onboarding analysis failed"},
        ) from exc

    await cache.delete(CacheKeys.profile(user_id))
    await cache.delete(CacheKeys.dialect_profile(user_id))
    await cache.delete(CacheKeys.drills(user_id))
    await cache.delete(CacheKeys.session_history(user_id))
    await cache.delete(CacheKeys.session_history(user_id, SessionKind.ONBOARDING.value))

    return OnboardingResponse(
        data=OnboardingData(dialect_profile=DialectProfileView.from_baseline(outcome.baseline))
    )


__all__ = ["router"]
