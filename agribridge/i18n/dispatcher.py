"""
Cached translation dispatcher.

auto_translate() takes a record (dict, list of dicts, nested structures) and
returns a Myanmar copy of it:

1. Plan - walk the record and decide, per string, whether the glossary
   answers it directly or it needs the model. Numbers are rendered with
   Myanmar digits straight away. No I/O.
2. Resolve - look each pending string up in the cache by
   (content id, field, hash); on a miss call the model and upsert the
   result. Bounded concurrency; every failure stays local to its field.
3. Rebuild - copy the record, placing resolved values by path.

Nested objects are cached under their parent's content id, so the
translations of a record's sub-documents live alongside the record itself.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from agribridge.i18n.cache import TranslationCache, TranslationCacheEntry, content_hash
from agribridge.i18n.classify import ValueKind, kind_of, looks_like_object_id
from agribridge.i18n.glossary import DEFAULT_CONFIG, LocalizationConfig
from agribridge.i18n.numerals import format_number, to_target_digits
from agribridge.i18n.translator import TranslationBackend
from agribridge.storage.local import InMemoryCacheStorage

logger = logging.getLogger(__name__)

# Content id used for values that do not belong to a stored record
STATIC_CONTENT_ID = "static_content"

# Technical keys that are never translated
SKIPPED_KEYS = frozenset({"_id", "__v", "id"})

# Shorter strings are not worth a model call
MIN_MODEL_TEXT_LENGTH = 2

Path = tuple[Union[str, int], ...]


# =============================================================================
# Plan
# =============================================================================


@dataclass(frozen=True)
class TranslationJob:
    """One string that needs the model (or the cache)."""

    path: Path
    content_id: str
    field: str
    text: str

    @property
    def text_hash(self) -> str:
        return content_hash(self.text)


@dataclass
class TranslationPlan:
    jobs: list[TranslationJob] = field(default_factory=list)
    rewrites: dict[Path, Any] = field(default_factory=dict)


def record_content_id(data: Mapping[str, Any]) -> str | None:
    """The record's own id, if it has one."""
    for key in ("_id", "id"):
        value = data.get(key)
        if value is None or value == "":
            continue
        if isinstance(value, Mapping) and "$oid" in value:
            return str(value["$oid"])
        return str(value)
    return None


def plan_translation(
    record: Any,
    content_id_override: str | None = None,
    config: LocalizationConfig = DEFAULT_CONFIG,
) -> TranslationPlan:
    """Collect translatable leaves without touching the cache or the model."""
    plan = TranslationPlan()
    _plan(record, (), content_id_override, plan, config)
    return plan


def _plan(
    value: Any,
    path: Path,
    content_id_override: str | None,
    plan: TranslationPlan,
    config: LocalizationConfig,
) -> None:
    kind = kind_of(value)

    if kind is ValueKind.ARRAY:
        for index, item in enumerate(value):
            _plan(item, path + (index,), content_id_override, plan, config)
        return

    if kind is not ValueKind.OBJECT:
        return

    content_id = content_id_override or record_content_id(value) or STATIC_CONTENT_ID

    for key, val in value.items():
        if key in SKIPPED_KEYS:
            continue

        child = path + (key,)
        child_kind = kind_of(val)

        if child_kind in (ValueKind.ARRAY, ValueKind.OBJECT):
            _plan(val, child, content_id, plan, config)

        elif child_kind is ValueKind.NUMBER:
            plan.rewrites[child] = to_target_digits(format_number(val), config)

        elif child_kind is ValueKind.STRING:
            trimmed = val.strip()
            if not trimmed or looks_like_object_id(trimmed):
                continue

            direct = config.lookup(trimmed)
            if direct is not None:
                plan.rewrites[child] = direct
            elif len(trimmed) < MIN_MODEL_TEXT_LENGTH:
                plan.rewrites[child] = to_target_digits(trimmed, config)
            else:
                plan.jobs.append(TranslationJob(child, content_id, str(key), trimmed))


# =============================================================================
# Rebuild
# =============================================================================


def rebuild(value: Any, replacements: Mapping[Path, Any], path: Path = ()) -> Any:
    """Copy value, substituting replacements by path. Input is not mutated."""
    kind = kind_of(value)

    if kind is ValueKind.ARRAY:
        return [rebuild(item, replacements, path + (i,)) for i, item in enumerate(value)]

    if kind is ValueKind.OBJECT:
        output = dict(value)
        for key, val in value.items():
            child = path + (key,)
            if child in replacements:
                output[key] = replacements[child]
            elif kind_of(val) in (ValueKind.ARRAY, ValueKind.OBJECT):
                output[key] = rebuild(val, replacements, child)
        return output

    return value


# =============================================================================
# Dispatcher
# =============================================================================


class TranslationDispatcher:
    """
    Resolves translation jobs against the cache and the model.

    Usage:
        dispatcher = TranslationDispatcher(cache, backend)
        translated = await dispatcher.auto_translate(record, enabled=True)
    """

    def __init__(
        self,
        cache: TranslationCache | None = None,
        backend: TranslationBackend | None = None,
        config: LocalizationConfig = DEFAULT_CONFIG,
        max_concurrency: int = 8,
        timeout: float | None = 30.0,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.cache = cache or TranslationCache(InMemoryCacheStorage())
        self._backend = backend
        self.config = config
        self.max_concurrency = max_concurrency
        self.timeout = timeout

    @property
    def backend(self) -> TranslationBackend:
        if self._backend is None:
            from agribridge.i18n.translator import DSPyTranslationBackend
            self._backend = DSPyTranslationBackend(self.config, max_workers=self.max_concurrency)
        return self._backend

    async def resolve(self, job: TranslationJob) -> str:
        """
        Translate one job. Never raises.

        Falls back to the trimmed source text when the model fails; cache
        errors are logged and otherwise ignored.
        """
        text_hash = job.text_hash

        try:
            cached = await self.cache.get(job.content_id, job.field, text_hash)
        except Exception as e:
            logger.warning(f"Cache lookup failed for {job.content_id}.{job.field}: {e}")
            cached = None

        if cached is not None:
            logger.debug(f"Cache hit for {job.content_id}.{job.field}")
            return cached.translated_text

        logger.debug(f"Cache miss for {job.content_id}.{job.field}")

        # A timeout frees this slot but not the worker thread behind it; the
        # DSPy backend caps those threads at max_concurrency.
        try:
            if self.timeout:
                translated = await asyncio.wait_for(self.backend.translate(job.text), self.timeout)
            else:
                translated = await self.backend.translate(job.text)
        except Exception as e:
            logger.warning(f"Translation failed for {job.content_id}.{job.field}: {e!r}")
            return job.text

        final = to_target_digits(translated, self.config)

        try:
            await self.cache.upsert(TranslationCacheEntry(
                content_id=job.content_id,
                field=job.field,
                source_text=job.text,
                translated_text=final,
                text_hash=text_hash,
            ))
        except Exception as e:
            logger.warning(f"Cache write failed for {job.content_id}.{job.field}: {e}")

        return final

    async def resolve_jobs(self, jobs: list[TranslationJob]) -> dict[Path, str]:
        """Resolve jobs concurrently, at most max_concurrency at a time."""
        if not jobs:
            return {}

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(job: TranslationJob) -> str:
            async with semaphore:
                return await self.resolve(job)

        results = await asyncio.gather(*(bounded(job) for job in jobs))
        return {job.path: result for job, result in zip(jobs, results)}

    async def auto_translate(
        self,
        record: Any,
        enabled: bool = True,
        content_id_override: str | None = None,
    ) -> Any:
        """
        Translate every human-facing field of a record.

        Args:
            record: Dict, list or nested structure (input is not mutated)
            enabled: The caller's "AI translation" setting; False is a no-op
            content_id_override: Cache records under this id instead of the record's own

        Returns:
            A structurally identical copy with translated leaves
        """
        if not enabled or not record:
            return record

        plan = plan_translation(record, content_id_override, self.config)
        replacements: dict[Path, Any] = dict(plan.rewrites)
        replacements.update(await self.resolve_jobs(plan.jobs))

        return rebuild(record, replacements)


# =============================================================================
# Module-level convenience functions
# =============================================================================


_dispatcher: TranslationDispatcher | None = None


def get_dispatcher() -> TranslationDispatcher:
    """Get or create the global dispatcher instance."""
    global _dispatcher
    if _dispatcher is None:
        from agribridge.config import get_settings
        settings = get_settings()
        _dispatcher = TranslationDispatcher(
            cache=TranslationCache(
                InMemoryCacheStorage(),
                ttl_seconds=settings.translation_cache_ttl_seconds,
            ),
            max_concurrency=settings.translation_max_concurrency,
            timeout=settings.translation_timeout_seconds,
        )
    return _dispatcher


def set_dispatcher(dispatcher: TranslationDispatcher | None) -> None:
    """Replace the global dispatcher (app startup, tests)."""
    global _dispatcher
    _dispatcher = dispatcher


async def auto_translate(
    record: Any,
    enabled: bool = True,
    content_id_override: str | None = None,
) -> Any:
    """Translate a record with the global dispatcher (convenience function)."""
    return await get_dispatcher().auto_translate(record, enabled, content_id_override)
