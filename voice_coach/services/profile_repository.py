"""SQLAlchemy repository for learner profiles and dialect baselines."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from voice_coach.application.interfaces import ProfileRepositoryInterface
from voice_coach.domain.models import DialectBaseline, DialectProfileRecord, ProfileRecord
from voice_coach.models import DialectProfile, Profile

_EDITABLE_FIELDS = frozenset({"name", "native_language", "target_language", "daily_goal_mins"})


class SqlAlchemyProfileRepository(ProfileRepositoryInterface):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_profile(self, user_id: str) -> Optional[ProfileRecord]:
        async with self._session_factory() as session:
            row = await session.get(Profile, user_id)
            return ProfileRecord.model_validate(row) if row is not None else None

    async def update_profile(
        self, user_id: str, fields: Mapping[str, Any]
    ) -> Optional[ProfileRecord]:
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update profile fields: {sorted(unknown)}")

        async with self._session_factory() as session:
            row = await session.get(Profile, user_id)
            if row is None:
                return None
            for name, value in fields.items():
                setattr(row, name, value)
            await session.commit()
            await session.refresh(row)
            return ProfileRecord.model_validate(row)

    async def get_native_language(self, user_id: str) -> Optional[str]:
        async with self._session_factory() as session:
            return await session.scalar(
                select(Profile.native_language).where(Profile.id == user_id)
            )

    async def get_dialect_profile(self, user_id: str) -> Optional[DialectProfileRecord]:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(DialectProfile).where(DialectProfile.user_id == user_id)
            )
            return DialectProfileRecord.model_validate(row) if row is not None else None

    async def upsert_dialect_profile(
        self,
        user_id: str,
        baseline: DialectBaseline,
        session_ids: list[str],
    ) -> None:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(DialectProfile).where(DialectProfile.user_id == user_id)
            )
            if row is None:
                row = DialectProfile(user_id=user_id)
                session.add(row)
            row.detected_region = baseline.detected_region
            row.filler_patterns = dict(baseline.filler_patterns)
            row.avg_wpm_baseline = baseline.avg_wpm_baseline
            row.weak_phonemes = list(baseline.weak_phonemes)
            row.onboarding_session_ids = list(session_ids)
            await session.commit()

    async def mark_onboarding_complete(self, user_id: str) -> None:
        async with self._session_factory() as session:
            profile = await session.get(Profile, user_id)
            if profile is None:
                profile = Profile(id=user_id)
                session.add(profile)
            profile.onboarding_complete = True
            await session.commit()


__all__ = ["SqlAlchemyProfileRepository"]
