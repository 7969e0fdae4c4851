"""Storage stage (Stage 01): upload the recording and sign a download URL."""

from __future__ import annotations

import logging

from voice_coach.application.interfaces import AudioStore
from voice_coach.domain.errors import StorageFailed
from voice_coach.services.retry import RetryPolicy

from .types import StoredAudio

logger = logging.getLogger(__name__)


def recording_path(user_id: str, timestamp_ms: int) -> str:
    return f"{user_id}/{timestamp_ms}.m4a"


async def store_recording(
    audio_store: AudioStore,
    audio: bytes,
    path: str,
    *,
    retry_policy: RetryPolicy,
    url_ttl_seconds: int,
) -> StoredAudio:
    """Upload then sign; both steps share one retry budget."""

    async def attempt() -> str:
        await audio_store.upload(audio, path)
        return await audio_store.create_signed_url(path, url_ttl_seconds)

    try:
        signed_url = await retry_policy.run(attempt, label="Audio upload")
    except Exception as exc:
        logger.error("Audio upload failed path=%s: %s", path, exc)
        raise StorageFailed("Failed to upload audio") from exc

    return StoredAudio(path=path, signed_url=signed_url)


__all__ = ["recording_path", "store_recording"]
