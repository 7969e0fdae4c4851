"""Response schemas for the learner profile and drills."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from voice_coach.domain.models import DialectProfileRecord, DrillSet, ProfileRecord


class ProfileView(ProfileRecord):
    """Profile row merged with the learner's dialect profile, if any."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    dialect_profile: Optional[DialectProfileRecord] = Field(
        default=None, alias="dialectProfile"
    )

    @classmethod
    def from_records(
        cls,
        profile: ProfileRecord,
        dialect_profile: Optional[DialectProfileRecord] = None,
    ) -> "ProfileView":
        return cls(**profile.model_dump(), dialect_profile=dialect_profile)


class ProfileResponse(BaseModel):
    success: bool = True
    data: ProfileView


class UpdateProfileResponse(BaseModel):
    success: bool = True
    data: ProfileRecord


class DrillsView(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sentences: list[str]
    target_phonemes: list[str]

    @classmethod
    def from_drill_set(cls, drills: DrillSet) -> "DrillsView":
        return cls(**drills.model_dump())


class DrillsResponse(BaseModel):
    success: bool = True
    data: DrillsView
