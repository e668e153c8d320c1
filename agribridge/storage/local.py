"""
In-process stores for development and tests.

Nothing here survives a restart. Values are deep-copied on the way in and on
the way out so callers can never alias stored state.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, NamedTuple

from agribridge.storage.base import (
    CacheStorage,
    MetadataStorage,
    StorageProvider,
)


# =============================================================================
# Records
# =============================================================================


def _matches(value: Any, wanted: Any) -> bool:
    if isinstance(wanted, (tuple, list, set, frozenset)):
        return value in wanted
    return value == wanted


class InMemoryMetadataStorage(MetadataStorage):
    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        record = copy.deepcopy(data)
        record["_id"] = id
        self._collection(collection)[id] = record

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        record = self._collection(collection).get(id)
        return None if record is None else copy.deepcopy(record)

    async def delete(self, collection: str, id: str) -> bool:
        return self._collection(collection).pop(id, None) is not None

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        matches = [
            record for record in self._collection(collection).values()
            if all(_matches(record.get(field), wanted) for field, wanted in filters.items())
        ]
        if order_by:
            matches.sort(key=lambda record: record[order_by], reverse=descending)
        return copy.deepcopy(matches[offset:offset + limit])


# =============================================================================
# Expiring cache
# =============================================================================


class _CacheItem(NamedTuple):
    value: Any
    expires_at: float | None


class InMemoryCacheStorage(CacheStorage):
    """Dict-backed cache. Expiry is checked lazily, when a key is read."""

    def __init__(self):
        self._items: dict[str, _CacheItem] = {}

    @staticmethod
    def _now() -> float:
        return datetime.now(timezone.utc).timestamp()

    def _expired(self, item: _CacheItem) -> bool:
        return item.expires_at is not None and self._now() > item.expires_at

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = self._now() + ttl if ttl else None
        self._items[key] = _CacheItem(copy.deepcopy(value), expires_at)

    async def get(self, key: str) -> Any | None:
        item = self._items.get(key)
        if item is None:
            return None
        if self._expired(item):
            del self._items[key]
            return None
        return copy.deepcopy(item.value)

    async def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    def __len__(self) -> int:
        return len(self._items)


def create_local_storage() -> StorageProvider:
    """Both stores in memory; the default when no REDIS_URL is configured."""
    return StorageProvider(
        metadata=InMemoryMetadataStorage(),
        cache=InMemoryCacheStorage(),
    )
