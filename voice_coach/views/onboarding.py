"""Response schemas for onboarding."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from voice_coach.domain.models import DialectBaseline


class DialectProfileView(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    detected_region: str
    avg_wpm_baseline: float
    weak_phonemes: list[dict[str, str]]
    filler_patterns: dict[str, int]

    @classmethod
    def from_baseline(cls, baseline: DialectBaseline) -> "DialectProfileView":
        return cls(**baseline.model_dump())


class OnboardingData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    dialect_profile: DialectProfileView
    message: str = "Voice profile created successfully"


class OnboardingResponse(BaseModel):
    success: bool = True
    data: OnboardingData
