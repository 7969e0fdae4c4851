"""In-process speech metrics.

Used as the fallback when the remote analyzer is unavailable and by the
onboarding baseline. Everything here is pure and deterministic.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Final, Iterable, Optional

from voice_coach.application.interfaces import MetricsAnalyzer

from .models import MetricsRequest, SpeechMetrics

FILLER_WORDS: Final[tuple[str, ...]] = (
    "um",
    "uh",
    "ah",
    "er",
    "basically",
    "actually",
    "literally",
    "like",
    "you know",
    "i mean",
    "sort of",
    "kind of",
    "right",
    "okay so",
    "so yeah",
    "only",
    "simply",
)

_FILLER_PATTERNS: Final[tuple[tuple[str, re.Pattern[str]], ...]] = tuple(
    (filler, re.compile(rf"\b{re.escape(filler)}\b", re.IGNORECASE))
    for filler in FILLER_WORDS
)
_PUNCTUATION = re.compile(r"[^\w\s]")

# Wide enough to quantize any finite float without InvalidOperation.
_ROUNDING_CONTEXT: Final = Context(prec=400, rounding=ROUND_HALF_UP)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator does (0.5 always goes up)."""

    if not math.isfinite(value):
        return value
    exponent = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(exponent, context=_ROUNDING_CONTEXT))


def count_words(transcript: str) -> int:
    return len(transcript.split())


def compute_wpm(transcript: str, duration_seconds: float) -> float:
    """Words per minute rounded to one decimal.

    0 when the duration is unknown, or so small that the rate is not a
    finite number.
    """

    minutes = duration_seconds / 60
    if minutes <= 0:
        return 0.0
    wpm = count_words(transcript) / minutes
    if not math.isfinite(wpm):
        return 0.0
    return round_half_up(wpm, 1)


def count_fillers(transcript: str, fillers: Iterable[str] | None = None) -> dict[str, int]:
    """Whole-word, case-insensitive occurrences per filler, in list order.

    Fillers with no match are left out.
    """

    if fillers is None:
        patterns = _FILLER_PATTERNS
    else:
        patterns = tuple(
            (filler, re.compile(rf"\b{re.escape(filler)}\b", re.IGNORECASE))
            for filler in fillers
        )

    counts: dict[str, int] = {}
    for filler, pattern in patterns:
        matches = len(pattern.findall(transcript))
        if matches:
            counts[filler] = matches
    return counts


def _normalize_tokens(text: str) -> list[str]:
    return _PUNCTUATION.sub("", text.lower()).split()


def compute_accuracy(transcript: str, prompt_text: str) -> int:
    """Share of transcript tokens found in the prompt's vocabulary, 0-100.

    Tokens are matched by set membership, not by position, so word order
    and repetition are not enforced.
    """

    transcript_tokens = _normalize_tokens(transcript)
    prompt_tokens = _normalize_tokens(prompt_text)
    vocabulary = set(prompt_tokens)

    matched = sum(1 for token in transcript_tokens if token in vocabulary)
    score = int(round_half_up(100 * matched / max(len(prompt_tokens), 1)))
    return min(score, 100)


def analyze_transcript(
    transcript: str,
    duration_seconds: float,
    prompt_text: Optional[str],
) -> SpeechMetrics:
    fillers = count_fillers(transcript)
    accuracy = compute_accuracy(transcript, prompt_text) if prompt_text else None
    return SpeechMetrics(
        wpm=compute_wpm(transcript, duration_seconds),
        filler_count=sum(fillers.values()),
        filler_words_found=list(fillers),
        accuracy_score=accuracy,
    )


class LocalMetricsAnalyzer(MetricsAnalyzer):
    """Fallback analyzer with the same contract as the remote service."""

    async def analyze(self, request: MetricsRequest) -> SpeechMetrics:
        return analyze_transcript(
            request.transcript,
            request.duration_seconds,
            request.prompt_text,
        )


__all__ = [
    "FILLER_WORDS",
    "LocalMetricsAnalyzer",
    "analyze_transcript",
    "compute_accuracy",
    "compute_wpm",
    "count_fillers",
    "count_words",
    "round_half_up",
]
