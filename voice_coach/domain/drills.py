"""Targeted drill sentences picked from a learner's dialect profile.

Sentences come from a fixed bank indexed by phoneme target. Weak phonemes
recorded on the profile are used first, then the region's usual targets,
then a general confidence set.
"""

from __future__ import annotations

from typing import Final, Iterable, Mapping, Optional

from .models import DrillSet

DRILL_COUNT: Final = 5

DRILL_BANK: Final[dict[str, tuple[str, ...]]] = {
    "v-w": (
        "The village has very warm weather in winter.",
        "We went to visit the vineyard on Wednesday.",
        "Victor wore a vest to the wedding event.",
        "The wolves wander through the valley every evening.",
        "William values hard work and a positive view.",
    ),
    "th-d": (
        "They thought the third theme was thoroughly interesting.",
        "This is the method that the author had in mind.",
        "The mother thanked the teacher with all her heart.",
        "Although it is thin, this thread is very strong.",
        "Health is important, so think about it every day.",
    ),
    "articles": (
        "I have a dog and the dog loves to play in a park.",
        "She found a job at the company she had always wanted.",
        "He bought a book from the library near the station.",
        "It is a great opportunity to work with a talented team.",
        "The answer to the question is in the first chapter.",
    ),
    "schwa": (
        "The problem with the system is the balance of the budget.",
        "A level of confidence comes from regular practice.",
        "The cabinet of ministers discussed the agenda.",
        "About a dozen people arrived at the station.",
        "The collection of data helps us find the pattern.",
    ),
    "pace": (
        "Good morning. My name is Priya and I am from Meerut.",
        "I completed my internship at a reputed software company.",
        "My greatest strength is my ability to adapt quickly.",
        "I believe teamwork and communication are key to success.",
        "I am eager to contribute my skills to your organization.",
    ),
}

GENERAL_DRILLS: Final[tuple[str, ...]] = (
    "I am looking for a good opportunity in this company.",
    "My greatest strength is my ability to work in a team.",
    "I completed my project within the given deadline.",
    "Please tell me about yourself and your background.",
    "I believe I can contribute effectively to your organization.",
)
GENERAL_TARGETS: Final[tuple[str, ...]] = ("pace", "articles")

REGION_DEFAULT_PHONEMES: Final[dict[str, tuple[str, ...]]] = {
    "hindi_belt": ("v-w", "articles"),
    "south_india": ("th-d", "pace"),
    "east_india": ("v-w", "pace"),
    "western_india": ("schwa", "articles"),
    "unknown": ("pace", "articles"),
}


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _fill_from_bank(
    phonemes: Iterable[str],
    sentences: list[str],
    targets: list[str],
) -> None:
    for phoneme in phonemes:
        bank = DRILL_BANK.get(phoneme)
        if not bank:
            continue
        targets.append(phoneme)
        sentences.extend(bank)
        if len(sentences) >= DRILL_COUNT:
            return


def select_drills(
    weak_phonemes: Iterable[Mapping[str, str]] = (),
    detected_region: Optional[str] = None,
) -> DrillSet:
    """Pick up to five distinct sentences and the phonemes they target."""

    sentences: list[str] = []
    targets: list[str] = []

    _fill_from_bank(
        (entry.get("phoneme", "") for entry in weak_phonemes),
        sentences,
        targets,
    )
    if len(sentences) < DRILL_COUNT and detected_region:
        _fill_from_bank(REGION_DEFAULT_PHONEMES.get(detected_region, ()), sentences, targets)

    if not sentences:
        sentences = list(GENERAL_DRILLS)
        targets = list(GENERAL_TARGETS)

    return DrillSet(
        sentences=_unique(sentences)[:DRILL_COUNT],
        target_phonemes=_unique(targets),
    )


__all__ = [
    "DRILL_BANK",
    "GENERAL_DRILLS",
    "REGION_DEFAULT_PHONEMES",
    "select_drills",
]
