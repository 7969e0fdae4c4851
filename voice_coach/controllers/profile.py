"""Learner profile endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from voice_coach.application.interfaces import Cache, ProfileRepositoryInterface
from voice_coach.controllers.dependencies import CacheDep, CurrentUserIdDep, ProfileRepositoryDep
from voice_coach.controllers.sessions import validation_error
from voice_coach.domain.errors import INTERNAL_ERROR, NOT_FOUND
from voice_coach.domain.models import DialectProfileRecord, ProfileUpdate
from voice_coach.services.cache import CacheKeys
from voice_coach.views import ProfileResponse, ProfileView, UpdateProfileResponse

router = APIRouter(prefix="/api/profile", tags=["profile"])

logger = logging.getLogger(__name__)

PROFILE_CACHE_TTL_SECONDS = 120
DIALECT_CACHE_TTL_SECONDS = 300


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": NOT_FOUND, "message": "Profile not found"},
    )


async def load_dialect_profile(
    user_id: str,
    profiles: ProfileRepositoryInterface,
    cache: Cache,
) -> Optional[DialectProfileRecord]:
    """Dialect profile through the ``dialect:{uid}`` cache entry."""

    key = CacheKeys.dialect_profile(user_id)
    cached = await cache.get(key)
    if cached is not None:
        try:
            return DialectProfileRecord.model_validate(cached)
        except ValidationError as exc:
            logger.warning("Discarding malformed cache entry key=%s: %s", key, exc)

    dialect_profile = await profiles.get_dialect_profile(user_id)
    if dialect_profile is not None:
        await cache.set(key, dialect_profile.model_dump(mode="json"), DIALECT_CACHE_TTL_SECONDS)
    return dialect_profile


@router.get("/me")
async def get_my_profile(
    user_id: CurrentUserIdDep,
    profiles: ProfileRepositoryDep,
    cache: CacheDep,
) -> ProfileResponse:
    """Profile merged with the dialect profile; cached for two minutes."""

    cache_key = CacheKeys.profile(user_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        try:
            return ProfileResponse(data=ProfileView.model_validate(cached))
        except ValidationError as exc:
            logger.warning("Discarding malformed cache entry key=%s: %s", cache_key, exc)

    try:
        profile = await profiles.get_profile(user_id)
        dialect_profile = (
            await load_dialect_profile(user_id, profiles, cache) if profile is not None else None
        )
    except Exception as exc:
        logger.exception("Fetch profile failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Failed to fetch profile"},
        ) from exc

    if profile is None:
        raise _not_found()

    view = ProfileView.from_records(profile, dialect_profile)
    await cache.set(
        cache_key,
        view.model_dump(mode="json", by_alias=True),
        PROFILE_CACHE_TTL_SECONDS,
    )
    return ProfileResponse(data=view)


@router.put("/me")
async def update_my_profile(
    update: ProfileUpdate,
    user_id: CurrentUserIdDep,
    profiles: ProfileRepositoryDep,
    cache: CacheDep,
) -> UpdateProfileResponse:
    changes = update.changes()
    if not changes:
        raise validation_error("No fields to update")

    try:
        updated = await profiles.update_profile(user_id, changes)
    except Exception as exc:
        logger.exception("Update profile failed user=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": INTERNAL_ERROR, "message": "Failed to update profile"},
        ) from exc

    if updated is None:
        raise _not_found()

    await cache.delete(CacheKeys.profile(user_id))
    return UpdateProfileResponse(data=updated)


__all__ = ["load_dialect_profile", "router"]
