"""Baseline voice profile from onboarding seed recordings.

Region is a static lookup on the declared native language; nothing is
inferred from the audio itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Sequence

from .metrics import compute_wpm, count_fillers, round_half_up
from .models import DialectBaseline

LANGUAGE_TO_REGION: Final[dict[str, str]] = {
    "hindi": "hindi_belt",
    "punjabi": "hindi_belt",
    "marathi": "western_india",
    "gujarati": "western_india",
    "bengali": "east_india",
    "odia": "east_india",
    "tamil": "south_india",
    "telugu": "south_india",
    "kannada": "south_india",
    "malayalam": "south_india",
}
UNKNOWN_REGION: Final = "unknown"

# ~128 kbps AAC
_BYTES_PER_SECOND: Final = 16000


@dataclass(frozen=True)
class SeedSample:
    """One transcribed seed recording."""

    transcript: str
    duration_seconds: float

    @property
    def wpm(self) -> float:
        return compute_wpm(self.transcript, self.duration_seconds)


def estimate_duration(audio_size_bytes: int) -> float:
    """Rough clip length from its encoded size, never below one second."""

    return max(audio_size_bytes / _BYTES_PER_SECOND, 1.0)


def resolve_region(native_language: str | None) -> str:
    if not native_language:
        return UNKNOWN_REGION
    return LANGUAGE_TO_REGION.get(native_language.strip().lower(), UNKNOWN_REGION)


def build_dialect_baseline(
    samples: Sequence[SeedSample],
    native_language: str | None,
) -> DialectBaseline:
    if not samples:
        raise ValueError("At least one transcribed seed sample is required.")

    filler_patterns: dict[str, int] = {}
    for sample in samples:
        for filler, count in count_fillers(sample.transcript).items():
            filler_patterns[filler] = filler_patterns.get(filler, 0) + count

    avg_wpm = round_half_up(sum(sample.wpm for sample in samples) / len(samples), 1)
    return DialectBaseline(
        detected_region=resolve_region(native_language),
        avg_wpm_baseline=avg_wpm,
        filler_patterns=filler_patterns,
    )


__all__ = [
    "LANGUAGE_TO_REGION",
    "SeedSample",
    "build_dialect_baseline",
    "estimate_duration",
    "resolve_region",
]
