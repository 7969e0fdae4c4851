"""Delay-then-retry policy shared by every outbound call."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff without jitter.

    The delay before attempt ``n + 1`` is
    ``base_delay * backoff_multiplier ** (n - 1)``. When every attempt fails,
    the last exception is re-raised unchanged.
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    backoff_multiplier: float = 2.0
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given (1-based) failed attempt."""

        return self.base_delay * self.backoff_multiplier ** (attempt - 1)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
        label: str = "operation",
    ) -> T:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except retry_on as exc:
                logger.warning(
                    "%s attempt %s/%s failed: %s",
                    label,
                    attempt,
                    self.max_attempts,
                    exc,
                )
                if attempt == self.max_attempts:
                    raise
                delay = self.delay_for(attempt)
                if delay > 0:
                    await self.sleep(delay)

        # The loop either returns or raises on the final attempt.
        raise RuntimeError(f"{label} retry loop exited without a result")


__all__ = ["RetryPolicy"]
