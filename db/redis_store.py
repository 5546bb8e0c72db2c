"""
Redis store — persistent cross-process cache for remote verdicts.

Best effort by contract: every Redis or decoding failure is logged and
reported as a miss, so a broken cache can only cost a recomputation.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

logger = structlog.get_logger()


class RedisStore:
    """JSON key-value store with TTL, backed by `redis.asyncio`."""

    def __init__(
        self,
        url: str = "",
        prefix: str = "lang-detect:",
        client: Optional[redis.Redis] = None,
    ) -> None:
        if client is None:
            client = redis.Redis.from_url(url, decode_responses=True)
        self._client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        try:
            raw = await self._client.get(self._key(key))
        except RedisError as e:
            logger.warning("redis_get_failed", key=key, error=str(e))
            return None
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("redis_payload_invalid", key=key, error=str(e))
            return None
        return value if isinstance(value, dict) else None

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        data = json.dumps(value, ensure_ascii=False, default=str)
        try:
            await self._client.set(self._key(key), data, ex=ttl_seconds)
        except RedisError as e:
            logger.warning("redis_set_failed", key=key, error=str(e))

    async def close(self) -> None:
        await self._client.aclose()
