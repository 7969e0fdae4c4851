"""Metrics stage (Stage 03): remote analyzer with a local fallback."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from voice_coach.application.interfaces import MetricsAnalyzer
from voice_coach.domain.models import MetricsRequest, SpeechMetrics

from .types import StageOutcome

logger = logging.getLogger(__name__)


async def measure_speech(
    request: MetricsRequest,
    *,
    remote: Optional[MetricsAnalyzer],
    local: MetricsAnalyzer,
    timeout_seconds: float,
) -> StageOutcome[SpeechMetrics]:
    """Try the remote analyzer once; any failure switches to local values.

    Without a remote analyzer the local values are the primary result, not
    a fallback.
    """

    if remote is None:
        return StageOutcome(await local.analyze(request))

    try:
        metrics = await asyncio.wait_for(remote.analyze(request), timeout=timeout_seconds)
        return StageOutcome(metrics)
    except Exception as exc:
        logger.warning("Remote metrics analyzer failed, using local fallback: %s", exc)

    return StageOutcome(await local.analyze(request), fallback_used=True)


__all__ = ["measure_speech"]
