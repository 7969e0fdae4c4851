"""Typed containers shared across the analysis pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class StageOutcome(Generic[T]):
    """Result of a recoverable stage.

    ``fallback_used`` is true when the primary collaborator failed and the
    value came from the stage's fallback instead.
    """

    value: T
    fallback_used: bool = False


@dataclass(frozen=True)
class StoredAudio:
    """Where a recording landed and how clients can fetch it."""

    path: str
    signed_url: str
