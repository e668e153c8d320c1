"""
Supported locales and utilities.

AgriBridge is bilingual: English is the source locale that records are
written in, Myanmar is the target locale everything is localized into.
"""

from enum import Enum


class Locale(str, Enum):
    """Supported locales."""

    EN = "en"  # English (source)
    MM = "mm"  # Myanmar / Burmese (target)


SOURCE_LOCALE = Locale.EN
TARGET_LOCALE = Locale.MM

LOCALE_NAMES: dict[str, str] = {
    "en": "English",
    "mm": "Myanmar",
}

SUPPORTED_LOCALES = list(Locale)


def get_locale_name(code: str) -> str:
    """Get human-readable locale name."""
    return LOCALE_NAMES.get(code.lower(), code)


def normalize_locale(code: str | Locale | None) -> Locale:
    """
    Normalize a locale code to a Locale.

    Accepts the codes the web client sends ("en", "mm"), ISO 639 codes for
    Burmese ("my", "mya", "bur"), plain names and the abstract role names
    "source" / "target".

    Raises:
        ValueError: If the code is not a supported locale.
    """
    if isinstance(code, Locale):
        return code
    if code is None:
        return SOURCE_LOCALE

    code = str(code).lower().strip()

    variants = {
        "": "en",
        "source": "en",
        "english": "en",
        "en-us": "en",
        "en-gb": "en",
        "target": "mm",
        "my": "mm",
        "mya": "mm",
        "bur": "mm",
        "my-mm": "mm",
        "burmese": "mm",
        "myanmar": "mm",
    }

    try:
        return Locale(variants.get(code, code))
    except ValueError:
        raise ValueError(f"Unsupported locale: {code!r}") from None


def is_target_locale(code: str | Locale | None) -> bool:
    """Check whether a locale asks for Myanmar transliteration."""
    return normalize_locale(code) == TARGET_LOCALE
