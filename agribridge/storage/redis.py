"""
Redis-backed cache storage.

Values are stored as JSON; expiry uses Redis' native key TTL so that old
translations disappear without any application-side purge job.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as aioredis

from agribridge.storage.base import CacheStorage

logger = logging.getLogger(__name__)


class RedisCacheStorage(CacheStorage):
    """Cache storage on a Redis server."""

    def __init__(self, client: aioredis.Redis, prefix: str = "agribridge:"):
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "agribridge:") -> RedisCacheStorage:
        client = aioredis.from_url(url, decode_responses=True)
        logger.info("Redis cache storage configured")
        return cls(client, prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        await self._client.set(self._key(key), payload, ex=ttl or None)

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def delete(self, key: str) -> bool:
        return bool(await self._client.delete(self._key(key)))

    async def exists(self, key: str) -> bool:
        return bool(await self._client.exists(self._key(key)))

    async def close(self) -> None:
        await self._client.aclose()
