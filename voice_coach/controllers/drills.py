"""Drill sentence generation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from voice_coach.controllers.dependencies import CacheDep, CurrentUserIdDep, ProfileRepositoryDep
from voice_coach.controllers.profile import load_dialect_profile
from voice_coach.domain.drills import select_drills
from voice_coach.domain.errors import INTERNAL_ERROR
from voice_coach.services.cache import CacheKeys
from voice_coach.views import DrillsResponse, DrillsView

router = APIRouter(prefix="/api/drills", tags=["drills"])

logger = logging.getLogger(__name__)

DRILLS_CACHE_TTL_SECONDS = 300


@router.get("/generate")
async def generate_drills(
    user_id: CurrentUserIdDep,
    profiles: ProfileRepositoryDep,
    cache: CacheDep,
) -> DrillsResponse:
    """Five sentences aimed at the learner's weak phonemes, or general ones."""

    cache_key = CacheKeys.drills(user_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        try:
            return DrillsResponse(data=DrillsView.model_validate(cached))
        except ValidationError as exc:
            logger.warning("Discarding malformed cache entry key=%s: %s", cache_key, exc)

    try:
        dialect_profile = await load_dialect_profile(user_id, profiles, cache)
    except Exception as exc:
        logger.exception("Generate drills failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Failed to generate drill sentences"},
        ) from exc

    if dialect_profile is None:
        drills = select_drills()
    else:
        drills = select_drills(dialect_profile.weak_phonemes, dialect_profile.detected_region)

    view = DrillsView.from_drill_set(drills)
    await cache.set(cache_key, view.model_dump(mode="json", by_alias=True), DRILLS_CACHE_TTL_SECONDS)
    return DrillsResponse(data=view)


__all__ = ["router"]
