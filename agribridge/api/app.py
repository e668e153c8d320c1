"""
FastAPI application for the AgriBridge localization service.

Exposes the display transformer and the cached translation dispatcher to
the marketplace back end and web client.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from agribridge import __version__
from agribridge.config import get_settings
from agribridge.i18n.cache import TranslationCache
from agribridge.i18n.dispatcher import TranslationDispatcher, set_dispatcher
from agribridge.i18n.glossary import LocalizationConfig
from agribridge.i18n.locales import SUPPORTED_LOCALES, Locale, get_locale_name, normalize_locale
from agribridge.i18n.localize import localize
from agribridge.services.announcement import ANNOUNCEMENT_TARGETS, AnnouncementService
from agribridge.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    storage: StorageProvider
    config: LocalizationConfig
    dispatcher: TranslationDispatcher
    announcements: AnnouncementService


state = AppState()


def build_localization_config() -> LocalizationConfig:
    settings = get_settings()
    if settings.glossary_path:
        config = LocalizationConfig.from_yaml(settings.glossary_path)
        logger.info(f"Loaded glossary with {len(config.glossary)} entries from {settings.glossary_path}")
    else:
        config = LocalizationConfig()
    prefixes = tuple(dict.fromkeys(config.cdn_prefixes + tuple(settings.cdn_url_prefix_list)))
    return LocalizationConfig(glossary=config.glossary, digits=config.digits, cdn_prefixes=prefixes)


def build_storage() -> StorageProvider:
    settings = get_settings()
    storage = create_local_storage()
    if settings.redis_url:
        from agribridge.storage.redis import RedisCacheStorage
        storage = StorageProvider(
            metadata=storage.metadata,
            cache=RedisCacheStorage.from_url(settings.redis_url),
        )
    return storage


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    from agribridge.integrations.sentry import init_sentry
    init_sentry(settings)

    state.storage = build_storage()
    state.config = build_localization_config()
    state.dispatcher = TranslationDispatcher(
        cache=TranslationCache(state.storage.cache, ttl_seconds=settings.translation_cache_ttl_seconds),
        config=state.config,
        max_concurrency=settings.translation_max_concurrency,
        timeout=settings.translation_timeout_seconds,
    )
    set_dispatcher(state.dispatcher)
    state.announcements = AnnouncementService(state.storage.metadata, state.dispatcher)

    logger.info(f"AgriBridge API starting in {settings.environment} mode")

    yield

    if hasattr(state.storage.cache, "close"):
        await state.storage.cache.close()
    set_dispatcher(None)
    logger.info("AgriBridge API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="AgriBridge Localization API",
    description="Myanmar localization and cached machine translation for AgriBridge",
    version=__version__,
    lifespan=lifespan,
)


settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    from agribridge.integrations.sentry import capture_exception
    capture_exception(exc, path=request.url.path, locale=request.query_params.get("lang"))
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# =============================================================================
# Dependencies
# =============================================================================


def get_localization_config() -> LocalizationConfig:
    return state.config


def get_translation_dispatcher() -> TranslationDispatcher:
    return state.dispatcher


def get_announcement_service() -> AnnouncementService:
    return state.announcements


def get_ai_translation_enabled() -> bool:
    """Server-wide switch; when off, no request can reach the model."""
    return get_settings().ai_translation_enabled


def get_locale(lang: str = Query("en", description="Display locale (en or mm)")) -> Locale:
    """The "lang" query parameter, English when absent."""
    try:
        return normalize_locale(lang)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# =============================================================================
# Health
# =============================================================================


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.get("/locales")
async def list_locales():
    """List supported display locales."""
    return {
        "locales": [
            {"code": locale.value, "name": get_locale_name(locale.value)}
            for locale in SUPPORTED_LOCALES
        ]
    }


# =============================================================================
# Localization
# =============================================================================


@app.post("/localize")
async def localize_payload(
    payload: Any = Body(...),
    locale: Locale = Depends(get_locale),
    config: LocalizationConfig = Depends(get_localization_config),
):
    """
    Render an arbitrary JSON payload for display.

    Ids, dates, emails and CDN URLs pass through untouched.
    """
    return localize(payload, locale, config)


class TranslateRequest(BaseModel):
    data: Any
    ai_enabled: bool = True
    content_id: str | None = None


@app.post("/translate")
async def translate_payload(
    request: TranslateRequest,
    dispatcher: TranslationDispatcher = Depends(get_translation_dispatcher),
    ai_allowed: bool = Depends(get_ai_translation_enabled),
):
    """
    Machine-translate a record into Myanmar.

    Results are cached per (content id, field, text hash). Fields the model
    fails on come back untranslated.
    """
    translated = await dispatcher.auto_translate(
        request.data,
        enabled=request.ai_enabled and ai_allowed,
        content_id_override=request.content_id,
    )
    return {"data": translated}


# =============================================================================
# Announcements
# =============================================================================


class AnnouncementCreate(BaseModel):
    title: str
    content: str
    target: str = "all"
    ai_enabled: bool = True
    admin_id: str | None = None


@app.post("/announcements", status_code=201)
async def create_announcement(
    request: AnnouncementCreate,
    service: AnnouncementService = Depends(get_announcement_service),
    ai_allowed: bool = Depends(get_ai_translation_enabled),
):
    """Publish an announcement, translating it when AI is enabled."""
    try:
        record = await service.publish(
            title=request.title,
            content=request.content,
            target=request.target,
            ai_enabled=request.ai_enabled and ai_allowed,
            admin_id=request.admin_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return record


@app.get("/announcements")
async def list_announcements(
    target: str | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    locale: Locale = Depends(get_locale),
    service: AnnouncementService = Depends(get_announcement_service),
):
    """List announcements for an audience, rendered in the requested locale."""
    if target is not None and target not in ANNOUNCEMENT_TARGETS:
        raise HTTPException(status_code=400, detail=f"Unknown target: {target}")

    records = await service.list(target=target, limit=limit, offset=offset)
    return {"announcements": [service.render(r, locale) for r in records]}


@app.get("/announcements/{announcement_id}")
async def get_announcement(
    announcement_id: str,
    locale: Locale = Depends(get_locale),
    service: AnnouncementService = Depends(get_announcement_service),
):
    record = await service.get(announcement_id)
    if not record:
        raise HTTPException(status_code=404, detail="Announcement not found")
    return service.render(record, locale)
