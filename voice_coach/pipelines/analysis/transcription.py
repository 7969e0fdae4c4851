"""Transcription stage (Stage 02)."""

from __future__ import annotations

import logging

from voice_coach.application.interfaces import SpeechTranscriber
from voice_coach.domain.errors import SttFailed

logger = logging.getLogger(__name__)
transcript_logger = logging.getLogger("voice_coach.logs.transcript")


async def transcribe_recording(
    transcriber: SpeechTranscriber,
    audio: bytes,
    filename_hint: str,
) -> str:
    """Delegate to the transcriber, which owns its own retries.

    An empty transcript is returned as-is; silence is valid input.
    """

    try:
        transcript = await transcriber.transcribe(audio, filename_hint)
    except Exception as exc:
        logger.error("Transcription failed file=%s: %s", filename_hint, exc)
        raise SttFailed("Speech recognition failed") from exc

    transcript_logger.info("file=%s transcript=%s", filename_hint, transcript)
    return transcript


__all__ = ["transcribe_recording"]
