"""
Tests for the translation cache and its storage backends.
"""

import json

import pytest

from agribridge.i18n.cache import (
    DEFAULT_TTL_SECONDS,
    TranslationCache,
    TranslationCacheEntry,
    content_hash,
    make_cache_key,
)
from agribridge.storage import InMemoryCacheStorage, InMemoryMetadataStorage, create_local_storage
from agribridge.storage.redis import RedisCacheStorage

from tests.conftest import OBJECT_ID


def make_entry(text="Wheat", translated="ဂျုံ", field="name"):
    return TranslationCacheEntry(
        content_id=OBJECT_ID,
        field=field,
        source_text=text,
        translated_text=translated,
        text_hash=content_hash(text),
    )


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the cache storage."""

    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.closed = False

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex

    async def get(self, key):
        return self.data.get(key)

    async def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    async def exists(self, key):
        return 1 if key in self.data else 0

    async def aclose(self):
        self.closed = True


# =============================================================================
# TranslationCache
# =============================================================================


class TestTranslationCache:
    def test_content_hash_is_deterministic(self):
        assert content_hash("Wheat") == content_hash("Wheat")
        assert content_hash("Wheat") != content_hash("Wheat ")
        assert len(content_hash("")) == 64

    def test_key_includes_triple(self):
        entry = make_entry()
        assert entry.key == make_cache_key(OBJECT_ID, "name", content_hash("Wheat"))
        assert OBJECT_ID in entry.key and "name" in entry.key

    @pytest.mark.asyncio
    async def test_round_trip(self, cache):
        await cache.upsert(make_entry())

        entry = await cache.get(OBJECT_ID, "name", content_hash("Wheat"))
        assert entry.translated_text == "ဂျုံ"
        assert entry.source_text == "Wheat"

    @pytest.mark.asyncio
    async def test_miss_on_other_hash_or_field(self, cache):
        await cache.upsert(make_entry())

        assert await cache.get(OBJECT_ID, "name", content_hash("Barley")) is None
        assert await cache.get(OBJECT_ID, "title", content_hash("Wheat")) is None

    @pytest.mark.asyncio
    async def test_upsert_overwrites(self, cache):
        await cache.upsert(make_entry(translated="first"))
        await cache.upsert(make_entry(translated="second"))

        entry = await cache.get(OBJECT_ID, "name", content_hash("Wheat"))
        assert entry.translated_text == "second"

    @pytest.mark.asyncio
    async def test_invalidate(self, cache):
        await cache.upsert(make_entry())

        assert await cache.invalidate(OBJECT_ID, "name", content_hash("Wheat"))
        assert await cache.get(OBJECT_ID, "name", content_hash("Wheat")) is None
        assert not await cache.invalidate(OBJECT_ID, "name", content_hash("Wheat"))

    @pytest.mark.asyncio
    async def test_entries_expire(self, cache_storage):
        cache = TranslationCache(cache_storage, ttl_seconds=60)
        now = 1_700_000_000.0
        cache_storage._now = lambda: now

        await cache.upsert(make_entry())
        assert await cache.get(OBJECT_ID, "name", content_hash("Wheat")) is not None

        now += 61
        assert await cache.get(OBJECT_ID, "name", content_hash("Wheat")) is None
        assert len(cache_storage) == 0

    def test_default_retention_is_thirty_days(self, cache):
        assert cache.ttl_seconds == DEFAULT_TTL_SECONDS == 30 * 24 * 60 * 60


# =============================================================================
# Storage backends
# =============================================================================


class TestInMemoryStorage:
    @pytest.mark.asyncio
    async def test_cache_values_are_copies(self):
        storage = InMemoryCacheStorage()
        value = {"a": [1]}
        await storage.set("k", value)
        value["a"].append(2)

        assert await storage.get("k") == {"a": [1]}
        assert await storage.exists("k")
        assert not await storage.exists("missing")

    @pytest.mark.asyncio
    async def test_metadata_query(self):
        storage = InMemoryMetadataStorage()
        await storage.save("announcements", "a", {"target": "farmer"})
        await storage.save("announcements", "b", {"target": "all"})

        docs = await storage.query("announcements", {"target": "farmer"})
        assert docs == [{"target": "farmer", "_id": "a"}]
        assert await storage.delete("announcements", "a")
        assert await storage.get("announcements", "a") is None

    @pytest.mark.asyncio
    async def test_metadata_query_any_of_and_ordering(self):
        storage = InMemoryMetadataStorage()
        for id, target, rank in [("a", "farmer", 2), ("b", "all", 3), ("c", "merchant", 1), ("d", "farmer", 1)]:
            await storage.save("announcements", id, {"target": target, "rank": rank})

        docs = await storage.query(
            "announcements",
            {"target": ("farmer", "all")},
            order_by="rank",
            descending=True,
        )
        assert [d["_id"] for d in docs] == ["b", "a", "d"]

        page = await storage.query("announcements", order_by="rank", limit=2, offset=1)
        assert [d["_id"] for d in page] == ["d", "a"]

    def test_local_provider(self):
        provider = create_local_storage()
        assert isinstance(provider.cache, InMemoryCacheStorage)
        assert isinstance(provider.metadata, InMemoryMetadataStorage)


class TestRedisStorage:
    @pytest.mark.asyncio
    async def test_json_values_with_ttl(self):
        client = FakeRedis()
        storage = RedisCacheStorage(client, prefix="test:")

        await storage.set("k", {"text": "ဂျုံ"}, ttl=30)

        assert client.expiry["test:k"] == 30
        assert json.loads(client.data["test:k"]) == {"text": "ဂျုံ"}
        assert await storage.get("k") == {"text": "ဂျုံ"}
        assert await storage.exists("k")

    @pytest.mark.asyncio
    async def test_missing_and_delete(self):
        storage = RedisCacheStorage(FakeRedis())

        assert await storage.get("nope") is None
        await storage.set("k", 1)
        assert await storage.delete("k")
        assert not await storage.delete("k")

    @pytest.mark.asyncio
    async def test_translation_cache_on_redis(self):
        client = FakeRedis()
        cache = TranslationCache(RedisCacheStorage(client))

        await cache.upsert(make_entry())

        entry = await cache.get(OBJECT_ID, "name", content_hash("Wheat"))
        assert entry.translated_text == "ဂျုံ"
        assert list(client.expiry.values()) == [DEFAULT_TTL_SECONDS]

    @pytest.mark.asyncio
    async def test_close(self):
        client = FakeRedis()
        await RedisCacheStorage(client).close()
        assert client.closed
