"""HTTP client for the remote speech metrics analyzer."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from voice_coach.application.interfaces import MetricsAnalyzer
from voice_coach.config.settings import settings
from voice_coach.domain.metrics import round_half_up
from voice_coach.domain.models import MetricsRequest, SpeechMetrics

logger = logging.getLogger(__name__)


class MetricsServiceError(RuntimeError):
    """Raised for any transport, timeout or payload problem."""


class RemoteMetricsPayload(BaseModel):
    """Wire shape returned by ``POST /analyze``."""

    wpm: float = Field(ge=0.0)
    filler_count: int = Field(ge=0)
    filler_words_found: list[str] = Field(default_factory=list)
    accuracy_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)

    model_config = {"extra": "ignore"}

    @field_validator("filler_words_found")
    @classmethod
    def dedupe_fillers(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def to_metrics(self, prompt_text: Optional[str]) -> SpeechMetrics:
        if prompt_text is None:
            accuracy = None
        elif self.accuracy_score is None:
            raise MetricsServiceError("Analyzer omitted accuracy for a prompted session.")
        else:
            accuracy = int(round_half_up(self.accuracy_score))
        return SpeechMetrics(
            wpm=round_half_up(self.wpm, 1),
            filler_count=self.filler_count,
            filler_words_found=self.filler_words_found,
            accuracy_score=accuracy,
        )


class RemoteMetricsAnalyzer(MetricsAnalyzer):
    """Calls the analyzer once per request; never retries."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.analyzer.base_url).rstrip("/")
        self._timeout = timeout_seconds or settings.analyzer.timeout_seconds
        self._transport = transport

    async def analyze(self, request: MetricsRequest) -> SpeechMetrics:
        body = {
            "transcript": request.transcript,
            "duration_secs": request.duration_seconds,
            "prompt_text": request.prompt_text,
            "session_type": request.session_kind.value,
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(f"{self._base_url}/analyze", json=body)
                response.raise_for_status()
                payload = RemoteMetricsPayload.model_validate(response.json())
            except httpx.HTTPError as exc:
                raise MetricsServiceError(f"Analyzer request failed: {exc}") from exc
            except (ValueError, ValidationError) as exc:
                raise MetricsServiceError(f"Analyzer returned an invalid payload: {exc}") from exc

        return payload.to_metrics(request.prompt_text)


__all__ = ["MetricsServiceError", "RemoteMetricsAnalyzer", "RemoteMetricsPayload"]
