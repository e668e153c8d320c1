"""
Announcement Service.

Admins publish announcements in English. When AI translation is enabled
the Myanmar text is produced once, at publish time, and stored next to the
source so readers never wait on the model.
"""

from __future__ import annotations

import logging
from typing import Any

from agribridge.core.utils import generate_id, utc_now
from agribridge.i18n.dispatcher import TranslationDispatcher
from agribridge.i18n.glossary import LocalizationConfig
from agribridge.i18n.locales import TARGET_LOCALE, Locale, is_target_locale
from agribridge.i18n.localize import localize
from agribridge.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)

ANNOUNCEMENT_TARGETS = ("all", "farmer", "merchant")
TRANSLATED_FIELDS = ("title", "content")


class AnnouncementService:
    """
    Publishes and reads announcements.

    Usage:
        service = AnnouncementService(storage.metadata, dispatcher)
        record = await service.publish("Rainy Season prices", "...", "farmer")
        mm = service.render(record, "mm")
    """

    def __init__(
        self,
        metadata: MetadataStorage,
        dispatcher: TranslationDispatcher,
        config: LocalizationConfig | None = None,
    ):
        self.metadata = metadata
        self.dispatcher = dispatcher
        self.config = config or dispatcher.config

    async def publish(
        self,
        title: str,
        content: str,
        target: str = "all",
        ai_enabled: bool = True,
        admin_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Create and store an announcement.

        Raises:
            ValueError: Blank title/content or unknown target audience
        """
        title = (title or "").strip()
        content = (content or "").strip()
        if not title or not content:
            raise ValueError("Announcement title and content are required")
        if target not in ANNOUNCEMENT_TARGETS:
            raise ValueError(f"Unknown announcement target: {target!r}")

        announcement_id = generate_id()
        now = utc_now()
        record: dict[str, Any] = {
            "_id": announcement_id,
            "title": title,
            "content": content,
            "target": target,
            "admin_id": admin_id,
            "created_at": now,
            "updated_at": now,
            "translations": {},
        }

        if ai_enabled:
            source = {"_id": announcement_id, "title": title, "content": content}
            translated = await self.dispatcher.auto_translate(source, True)
            record["translations"][TARGET_LOCALE.value] = {
                key: translated[key] for key in TRANSLATED_FIELDS
            }

        await self.metadata.save(Collections.ANNOUNCEMENTS, announcement_id, record)
        logger.info(f"Announcement {announcement_id} published to {target}")
        return record

    async def get(self, announcement_id: str) -> dict[str, Any] | None:
        return await self.metadata.get(Collections.ANNOUNCEMENTS, announcement_id)

    async def list(
        self,
        target: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Newest first. A target audience also sees announcements for "all"."""
        filters = {"target": (target, "all")} if target else None
        return await self.metadata.query(
            Collections.ANNOUNCEMENTS,
            filters=filters,
            limit=limit,
            offset=offset,
            order_by="created_at",
            descending=True,
        )

    def render(self, record: dict[str, Any], locale: str | Locale = Locale.EN) -> dict[str, Any]:
        """
        Shape a stored announcement for display in a locale.

        Myanmar readers get the stored translation when there is one, and
        the glossary/digit rendering of the source text otherwise.
        """
        doc = {k: v for k, v in record.items() if k != "translations"}
        target = is_target_locale(locale)
        if target:
            translated = (record.get("translations") or {}).get(TARGET_LOCALE.value)
            if translated:
                doc.update(translated)
        return localize(doc, locale, self.config)
