"""Best-effort cache backed by the Upstash Redis REST API.

Caching must never break a request: every failure is logged and swallowed,
and a missing configuration simply disables the cache.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from voice_coach.application.interfaces import Cache
from voice_coach.config.settings import settings

logger = logging.getLogger(__name__)


class CacheKeys:
    """Cache key helpers shared by every controller."""

    @staticmethod
    def profile(user_id: str) -> str:
        return f"profile:{user_id}"

    @staticmethod
    def dialect_profile(user_id: str) -> str:
        return f"dialect:{user_id}"

    @staticmethod
    def drills(user_id: str) -> str:
        return f"drills:{user_id}"

    @staticmethod
    def session_history(user_id: str, session_kind: str | None = None) -> str:
        return f"sessions:{user_id}:{session_kind or 'all'}"


class NullCache(Cache):
    """Used when no cache backend is configured."""

    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int = 300) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None


class UpstashCache(Cache):
    """Redis commands sent as JSON arrays over HTTPS."""

    def __init__(
        self,
        url: str,
        token: str,
        *,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _command(self, *args: Any) -> Any:
        response = await self._client.post("/", json=list(args))
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected cache response: {payload!r}")
        if "error" in payload:
            raise ValueError(payload["error"])
        return payload.get("result")

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._command("GET", key)
            if raw is None:
                return None
            return json.loads(raw)
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            logger.warning("Cache GET failed key=%s: %s", key, exc)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int = 300) -> None:
        try:
            await self._command("SET", key, json.dumps(value, default=str), "EX", ttl_seconds)
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            logger.warning("Cache SET failed key=%s: %s", key, exc)

    async def delete(self, key: str) -> None:
        try:
            await self._command("DEL", key)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Cache DEL failed key=%s: %s", key, exc)

    async def aclose(self) -> None:
        await self._client.aclose()


_cache: Cache | None = None


def get_cache() -> Cache:
    """Return the process-wide cache, creating it on first use."""

    global _cache
    if _cache is None:
        config = settings.cache
        if config.url and config.token:
            _cache = UpstashCache(
                config.url,
                config.token.get_secret_value(),
                timeout_seconds=config.timeout_seconds,
            )
        else:
            logger.warning("Upstash Redis credentials not set; cache is disabled")
            _cache = NullCache()
    return _cache


async def close_cache() -> None:
    global _cache
    if isinstance(_cache, UpstashCache):
        await _cache.aclose()
    _cache = None


__all__ = ["CacheKeys", "NullCache", "UpstashCache", "close_cache", "get_cache"]
