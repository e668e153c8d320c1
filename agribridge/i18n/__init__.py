"""
Internationalization - Myanmar localization and cached LLM translation.

Design:
1. localize() renders any payload for display: Myanmar digits, glossary
   phrases, thousands grouping. Pure, no I/O.
2. auto_translate() machine-translates record text, memoized per
   (content id, field, content hash) for 30 days.
3. Identifier, date, email and URL fields are never touched.

Usage:
    from agribridge.i18n import localize, auto_translate

    localize({"price": 15000, "unit": "Bag"}, "mm")
    await auto_translate(announcement, enabled=user.ai_enabled)
"""

from agribridge.i18n.locales import (
    Locale,
    SUPPORTED_LOCALES,
    get_locale_name,
    normalize_locale,
    is_target_locale,
)
from agribridge.i18n.glossary import (
    LocalizationConfig,
    DEFAULT_CONFIG,
    DEFAULT_GLOSSARY,
    MYANMAR_DIGITS,
)
from agribridge.i18n.classify import (
    FieldKind,
    ValueKind,
    classify_key,
    kind_of,
)
from agribridge.i18n.numerals import (
    format_number,
    transliterate_numerals,
)
from agribridge.i18n.localize import localize
from agribridge.i18n.cache import (
    TranslationCache,
    TranslationCacheEntry,
    content_hash,
)
from agribridge.i18n.translator import (
    TranslationBackend,
    DSPyTranslationBackend,
    TranslationError,
)
from agribridge.i18n.dispatcher import (
    TranslationDispatcher,
    auto_translate,
    get_dispatcher,
    set_dispatcher,
)

__all__ = [
    # Locales
    "Locale",
    "SUPPORTED_LOCALES",
    "get_locale_name",
    "normalize_locale",
    "is_target_locale",
    # Tables
    "LocalizationConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_GLOSSARY",
    "MYANMAR_DIGITS",
    # Classification
    "FieldKind",
    "ValueKind",
    "classify_key",
    "kind_of",
    # Transformer
    "format_number",
    "transliterate_numerals",
    "localize",
    # Cache & dispatcher
    "TranslationCache",
    "TranslationCacheEntry",
    "content_hash",
    "TranslationBackend",
    "DSPyTranslationBackend",
    "TranslationError",
    "TranslationDispatcher",
    "auto_translate",
    "get_dispatcher",
    "set_dispatcher",
]
