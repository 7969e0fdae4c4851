"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import tempfile

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from voice_coach.application.interfaces import SpeechTranscriber
from voice_coach.config.settings import settings
from voice_coach.services.retry import RetryPolicy

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


class TranscriptionError(RuntimeError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


class TranscribeService(SpeechTranscriber):
    """High-level facade for streaming audio to Amazon Transcribe.

    Each attempt converts the upload to PCM, streams it and waits at most
    ``timeout_seconds``. Attempts are governed by ``retry_policy``; once it
    is exhausted a ``TranscriptionError`` is raised. An empty transcript
    (silence) is a valid result.
    """

    def __init__(
        self,
        region: str,
        language_code: str = "en-IN",
        media_sample_rate_hz: int = 16000,
        media_encoding: str = "pcm",
        *,
        timeout_seconds: float = 30.0,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._region = region
        self._language_code = language_code
        self._media_sample_rate_hz = media_sample_rate_hz
        self._media_encoding = media_encoding
        self._timeout_seconds = timeout_seconds
        self._retry_policy = retry_policy or RetryPolicy(
            max_attempts=3, base_delay=1.0, backoff_multiplier=1.0
        )

        # Ensure credentials are available to the SDK
        if settings.s3.access_key:
            os.environ["AWS_ACCESS_KEY_ID"] = settings.s3.access_key
        if settings.s3.secret_key:
            os.environ["AWS_SECRET_ACCESS_KEY"] = settings.s3.secret_key

        self._client = TranscribeStreamingClient(region=region)

    async def transcribe(self, audio: bytes, filename_hint: str) -> str:
        if not audio:
            raise TranscriptionError("The uploaded audio file is empty.")

        async def attempt() -> str:
            return await asyncio.wait_for(
                self._stream_once(audio, filename_hint),
                timeout=self._timeout_seconds,
            )

        try:
            return await self._retry_policy.run(attempt, label="Transcribe")
        except Exception as exc:
            logger.error("Transcription failed after all retries file=%s: %s", filename_hint, exc)
            raise TranscriptionError("Speech recognition failed") from exc

    async def _stream_once(self, audio: bytes, filename_hint: str) -> str:
        pcm_data = await self._convert_to_pcm(audio)

        stream = await self._client.start_stream_transcription(
            language_code=self._language_code,
            media_sample_rate_hz=self._media_sample_rate_hz,
            media_encoding=self._media_encoding,
        )
        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks() -> None:
            # Pace the upload at real-time speed (16-bit mono).
            bytes_per_sec = self._media_sample_rate_hz * 2
            sleep_time = _CHUNK_SIZE / bytes_per_sec

            logger.info(
                "Starting stream file=%s bytes=%s sleep=%.4fs",
                filename_hint,
                len(pcm_data),
                sleep_time,
            )
            for i in range(0, len(pcm_data), _CHUNK_SIZE):
                await stream.input_stream.send_audio_event(audio_chunk=pcm_data[i : i + _CHUNK_SIZE])
                await asyncio.sleep(sleep_time)
            await stream.input_stream.end_stream()

        await asyncio.gather(write_chunks(), handler.handle_events())
        transcript = handler.transcript.strip()
        logger.info("Transcription complete file=%s length=%s", filename_hint, len(transcript))
        return transcript

    async def _convert_to_pcm(self, audio: bytes) -> bytes:
        """Convert input audio to raw PCM s16le via ffmpeg using a thread."""
        return await run_in_threadpool(self._convert_to_pcm_sync, audio)

    def _convert_to_pcm_sync(self, audio: bytes) -> bytes:
        """Synchronous ffmpeg conversion using a temporary file to support seeking."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=".tmp") as tmp_file:
            tmp_file.write(audio)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    "ffmpeg",
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
            if not process.stdout:
                logger.warning(
                    "ffmpeg produced empty output. stderr: %s",
                    process.stderr.decode("utf-8", errors="replace"),
                )
            return process.stdout
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if not result.is_partial and result.alternatives:
                self.transcript += result.alternatives[0].transcript + " "


def build_transcribe_service() -> TranscribeService:
    config = settings.transcribe
    return TranscribeService(
        region=config.region,
        language_code=config.language_code,
        media_sample_rate_hz=config.media_sample_rate_hz,
        timeout_seconds=config.timeout_seconds,
        retry_policy=RetryPolicy(
            max_attempts=config.max_attempts,
            base_delay=config.retry_delay,
            backoff_multiplier=1.0,
        ),
    )


__all__ = ["TranscribeService", "TranscriptionError", "build_transcribe_service"]
