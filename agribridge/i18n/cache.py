"""
Translation cache.

Model translations are memoized per (content id, field, content hash). The
hash is part of the key, so editing a field's text produces a new entry
instead of serving the old translation. Entries expire after the configured
retention window; expiry is enforced by the underlying CacheStorage.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from agribridge.storage.base import CacheStorage

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60 * 24 * 30  # 30 days


def content_hash(text: str) -> str:
    """Deterministic digest of a source string."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class TranslationCacheEntry(BaseModel):
    """A memoized model translation."""

    content_id: str
    field: str
    source_text: str
    translated_text: str
    text_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        return make_cache_key(self.content_id, self.field, self.text_hash)


def make_cache_key(content_id: str, field: str, text_hash: str) -> str:
    return f"trans:{content_id}:{field}:{text_hash}"


class TranslationCache:
    """
    Translation cache over a CacheStorage backend.

    Usage:
        cache = TranslationCache(InMemoryCacheStorage())
        entry = await cache.get("507f...", "title", content_hash("Wheat"))
    """

    def __init__(self, storage: CacheStorage, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._storage = storage
        self.ttl_seconds = ttl_seconds

    async def get(self, content_id: str, field: str, text_hash: str) -> TranslationCacheEntry | None:
        """Look up an entry by its exact triple."""
        raw = await self._storage.get(make_cache_key(content_id, field, text_hash))
        if raw is None:
            return None
        return TranslationCacheEntry.model_validate(raw)

    async def upsert(self, entry: TranslationCacheEntry) -> None:
        """Insert or overwrite; concurrent writers for one triple converge."""
        await self._storage.set(entry.key, entry.model_dump(mode="json"), ttl=self.ttl_seconds)

    async def invalidate(self, content_id: str, field: str, text_hash: str) -> bool:
        return await self._storage.delete(make_cache_key(content_id, field, text_hash))
