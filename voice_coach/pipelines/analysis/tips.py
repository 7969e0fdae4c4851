"""Tips stage (Stage 04). Never raises."""

from __future__ import annotations

import logging

from voice_coach.application.interfaces import TipGenerator
from voice_coach.domain.models import TipContext
from voice_coach.services.retry import RetryPolicy
from voice_coach.services.tip_generator import FALLBACK_TIPS, MAX_TIPS

from .types import StageOutcome

logger = logging.getLogger(__name__)


async def coaching_tips(
    generator: TipGenerator,
    context: TipContext,
    *,
    retry_policy: RetryPolicy,
) -> StageOutcome[list[str]]:
    async def attempt() -> list[str]:
        tips = [tip for tip in await generator.generate_tips(context) if tip.strip()]
        if not tips:
            raise ValueError("Tip generator returned no tips")
        return tips[:MAX_TIPS]

    try:
        return StageOutcome(await retry_policy.run(attempt, label="Tip generation"))
    except Exception as exc:
        logger.warning("Tip generation exhausted retries, using fallback tips: %s", exc)
        return StageOutcome(list(FALLBACK_TIPS), fallback_used=True)


__all__ = ["coaching_tips"]
