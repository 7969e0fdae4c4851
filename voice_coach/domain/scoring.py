"""Headline score for a session."""

from __future__ import annotations

from typing import Optional

from .metrics import round_half_up

IDEAL_WPM = 150.0
FILLER_PENALTY_PER_WORD = 5
MAX_FILLER_PENALTY = 30
NEUTRAL_ACCURACY = 75

PACE_WEIGHT = 0.3
ACCURACY_WEIGHT = 0.5
FILLER_WEIGHT = 0.2


def compute_overall_score(
    wpm: float,
    filler_count: int,
    accuracy_score: Optional[int],
) -> int:
    """Weighted pace/accuracy/filler score in [0, 100].

    Pace is measured against ``IDEAL_WPM`` and capped at 100. Free practice
    sessions (no accuracy) get the neutral accuracy term.
    """

    wpm_score = min(max(wpm / IDEAL_WPM * 100, 0.0), 100.0)
    filler_penalty = min(filler_count * FILLER_PENALTY_PER_WORD, MAX_FILLER_PENALTY)
    accuracy_term = NEUTRAL_ACCURACY if accuracy_score is None else accuracy_score

    overall = (
        wpm_score * PACE_WEIGHT
        + accuracy_term * ACCURACY_WEIGHT
        + (100 - filler_penalty) * FILLER_WEIGHT
    )
    return int(round_half_up(overall))


__all__ = ["compute_overall_score", "IDEAL_WPM", "NEUTRAL_ACCURACY"]
