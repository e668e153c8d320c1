"""
Locale-aware payload transformer.

localize() walks any decoded JSON value and returns a copy with the same
shape in which human-facing strings and numbers are rendered for the
requested locale. It has no I/O and never raises, so it can run inline in
any request handler.

Usage:
    from agribridge.i18n import localize

    localize({"unit": "Bag", "price": 15000}, "mm")
    # -> {"unit": "အိတ်", "price": "၁၅,၀၀၀"}
"""

from __future__ import annotations

from typing import Any, Mapping

from agribridge.i18n.classify import (
    FieldKind,
    ValueKind,
    classify_key,
    is_literal_value,
    kind_of,
)
from agribridge.i18n.glossary import DEFAULT_CONFIG, LocalizationConfig
from agribridge.i18n.locales import Locale, is_target_locale
from agribridge.i18n.numerals import format_number, is_numeric_text, transliterate_numerals


def localize_text(text: str, target: bool, config: LocalizationConfig = DEFAULT_CONFIG) -> str:
    """
    Render one string.

    Target locale: full transliteration. Source locale: numeric strings get
    thousands separators, anything else is returned unchanged.
    """
    if target:
        return transliterate_numerals(text, config)
    trimmed = text.strip()
    if trimmed and is_numeric_text(trimmed):
        return format_number(trimmed)
    return text


def localize_number(value: Any, target: bool, config: LocalizationConfig = DEFAULT_CONFIG) -> str:
    if target:
        return transliterate_numerals(value, config)
    return format_number(value)


def localize(
    value: Any,
    locale: str | Locale = Locale.EN,
    config: LocalizationConfig | None = None,
) -> Any:
    """
    Localize a value for display.

    Args:
        value: Decoded JSON (dicts, lists, scalars); dates and ids pass through
        locale: "en"/"source" or "mm"/"target"
        config: Glossary and digit tables (defaults to the built-in ones)

    Returns:
        A new value of the same shape. The input is never mutated.
    """
    config = config or DEFAULT_CONFIG
    try:
        target = is_target_locale(locale)
    except ValueError:
        target = False
    return _walk(value, target, config)


def _walk(value: Any, target: bool, config: LocalizationConfig) -> Any:
    kind = kind_of(value)

    if kind is ValueKind.STRING:
        return localize_text(value, target, config)
    if kind is ValueKind.ARRAY:
        return [_walk(item, target, config) for item in value]
    if kind is ValueKind.OBJECT:
        return _walk_object(value, target, config)

    # Top-level numbers are left alone; only fields are formatted
    return value


def _walk_object(data: Mapping[str, Any], target: bool, config: LocalizationConfig) -> dict[str, Any]:
    output = dict(data)

    for key, val in data.items():
        kind = kind_of(val)
        field = classify_key(str(key))

        if field is FieldKind.IDENTIFIER and kind not in (ValueKind.ARRAY, ValueKind.OBJECT):
            continue
        if field in (FieldKind.DATETIME, FieldKind.EMAIL):
            continue

        if kind is ValueKind.STRING:
            text = val.strip()
            if is_literal_value(text, config.cdn_prefixes):
                continue
            if target:
                output[key] = transliterate_numerals(text, config)
            elif text and is_numeric_text(text):
                output[key] = format_number(text)
        elif kind is ValueKind.NUMBER:
            output[key] = localize_number(val, target, config)
        elif kind in (ValueKind.ARRAY, ValueKind.OBJECT):
            output[key] = _walk(val, target, config)

    return output
