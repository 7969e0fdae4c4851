"""Fatal pipeline failures.

Each error carries a stable ``code`` that the HTTP layer maps to a status.
Recoverable stage failures never use these classes; they are absorbed inside
their stage and reported through ``StageOutcome.fallback_used`` instead.
"""

from __future__ import annotations

STORAGE_FAILED = "STORAGE_FAILED"
STT_FAILED = "STT_FAILED"
INTERNAL_ERROR = "INTERNAL_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"


class PipelineError(RuntimeError):
    """Base class for failures that abort an analysis run."""

    code: str = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StorageFailed(PipelineError):
    """Audio upload or signed URL creation exhausted its retries."""

    code = STORAGE_FAILED


class SttFailed(PipelineError):
    """Speech-to-text failed after the transcriber's own retries."""

    code = STT_FAILED


class PersistenceFailed(PipelineError):
    """The session record could not be written."""

    code = INTERNAL_ERROR


__all__ = [
    "PipelineError",
    "StorageFailed",
    "SttFailed",
    "PersistenceFailed",
    "STORAGE_FAILED",
    "STT_FAILED",
    "INTERNAL_ERROR",
    "VALIDATION_ERROR",
    "NOT_FOUND",
]
