"""
Shared fixtures.
"""

from __future__ import annotations

import asyncio

import pytest

from agribridge.i18n.cache import TranslationCache
from agribridge.i18n.dispatcher import TranslationDispatcher
from agribridge.i18n.translator import TranslationBackend
from agribridge.services.announcement import AnnouncementService
from agribridge.storage.local import InMemoryCacheStorage, InMemoryMetadataStorage


OBJECT_ID = "507f1f77bcf86cd799439011"
OTHER_OBJECT_ID = "65a1b2c3d4e5f60718293a4b"


class FakeBackend(TranslationBackend):
    """Deterministic stand-in for the LLM."""

    def __init__(self, translations: dict[str, str] | None = None, fail_on: set[str] | None = None, delay: float = 0.0):
        self.translations = translations or {}
        self.fail_on = set(fail_on or ())
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def translate(self, text: str) -> str:
        self.calls.append(text)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if text in self.fail_on:
                raise RuntimeError("rate limited")
            return self.translations.get(text, f"MM[{text}]")
        finally:
            self.in_flight -= 1


class BrokenCacheStorage(InMemoryCacheStorage):
    """Cache backend that is down."""

    async def get(self, key):
        raise ConnectionError("cache unavailable")

    async def set(self, key, value, ttl=None):
        raise ConnectionError("cache unavailable")


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def cache_storage():
    return InMemoryCacheStorage()


@pytest.fixture
def cache(cache_storage):
    return TranslationCache(cache_storage)


@pytest.fixture
def dispatcher(cache, backend):
    return TranslationDispatcher(cache=cache, backend=backend)


@pytest.fixture
def metadata():
    return InMemoryMetadataStorage()


@pytest.fixture
def announcement_service(metadata, dispatcher):
    return AnnouncementService(metadata, dispatcher)
