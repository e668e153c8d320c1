"""
Glossary and digit tables.

The glossary maps English agricultural/marketplace phrases to their Myanmar
rendering; the digit map maps ASCII digits to Myanmar digits. Both are
bundled into an immutable LocalizationConfig that callers inject into the
transformer and the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml


# =============================================================================
# Default Tables
# =============================================================================


DEFAULT_GLOSSARY: dict[str, str] = {
    "MMK": "ကျပ်",
    "Bag": "အိတ်",
    "Bags": "အိတ်",
    "Rainy": "မိုးရာသီ",
    "Summer": "နွေရာသီ",
    "Winter": "ဆောင်ရာသီ",
    "Rainy Season": "မိုးရာသီ",
    "Summer Season": "နွေရာသီ",
    "Winter Season": "ဆောင်ရာသီ",
    "Matpe": "မတ်ပဲ",
    "Seeds": "မျိုးစေ့များ",
    "Fertilizer": "ဓာတ်မြေဩဇာ",
    "Crops": "သီးနှံများ",
    "merchant_preorders": "ကြိုတင်မှာယူမှုများ",
    "merchant_disputes": "အငြင်းပွားမှုများ",
}

MYANMAR_DIGITS: dict[str, str] = {
    str(i): glyph for i, glyph in enumerate("၀၁၂၃၄၅၆၇၈၉")
}

DEFAULT_CDN_PREFIXES: tuple[str, ...] = ("https://res.cloudinary.com/",)

ASCII_DIGITS = "0123456789"


# =============================================================================
# Localization Config
# =============================================================================


@dataclass(frozen=True)
class LocalizationConfig:
    """
    Immutable tables shared by the transformer and the dispatcher.

    Usage:
        config = LocalizationConfig(glossary={"Bag": "X"})
        config.lookup("bag")  # -> "X"
    """

    glossary: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_GLOSSARY))
    digits: Mapping[str, str] = field(default_factory=lambda: dict(MYANMAR_DIGITS))
    cdn_prefixes: tuple[str, ...] = DEFAULT_CDN_PREFIXES

    def __post_init__(self) -> None:
        _validate_digits(self.digits)
        object.__setattr__(self, "glossary", MappingProxyType(dict(self.glossary)))
        object.__setattr__(self, "digits", MappingProxyType(dict(self.digits)))
        object.__setattr__(self, "cdn_prefixes", tuple(self.cdn_prefixes))

    def __hash__(self) -> int:
        return hash((
            tuple(sorted(self.glossary.items())),
            tuple(sorted(self.digits.items())),
            self.cdn_prefixes,
        ))

    @cached_property
    def sorted_glossary_keys(self) -> tuple[str, ...]:
        """Glossary keys, longest first."""
        return tuple(sorted(self.glossary, key=len, reverse=True))

    @cached_property
    def _folded(self) -> dict[str, str]:
        folded: dict[str, str] = {}
        # Longest-first so that on a case collision the earlier key wins
        for key in self.sorted_glossary_keys:
            folded.setdefault(key.casefold(), self.glossary[key])
        return folded

    def lookup(self, phrase: str) -> str | None:
        """Case-insensitive whole-phrase glossary lookup."""
        return self._folded.get(phrase.strip().casefold())

    def with_glossary(self, glossary: Mapping[str, str]) -> LocalizationConfig:
        """Return a copy using a different glossary."""
        return LocalizationConfig(glossary=glossary, digits=self.digits, cdn_prefixes=self.cdn_prefixes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocalizationConfig:
        digits = data.get("digits")
        if isinstance(digits, (list, tuple, str)):
            digits = {str(i): glyph for i, glyph in enumerate(digits)}
        return cls(
            glossary=data.get("glossary") or DEFAULT_GLOSSARY,
            digits=digits or MYANMAR_DIGITS,
            cdn_prefixes=tuple(data.get("cdn_prefixes") or DEFAULT_CDN_PREFIXES),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> LocalizationConfig:
        """
        Load tables from a YAML file.

        Format:
            glossary:
              Bag: အိတ်
            digits: "၀၁၂၃၄၅၆၇၈၉"   # optional, list or mapping also accepted
            cdn_prefixes: [...]      # optional
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Glossary file must contain a mapping: {path}")
        return cls.from_dict(data)


def _validate_digits(digits: Mapping[str, str]) -> None:
    """A digit map must cover 0-9 exactly, one distinct glyph each."""
    if sorted(digits) != list(ASCII_DIGITS):
        raise ValueError(f"Digit map must have exactly the keys 0-9, got {sorted(digits)}")
    glyphs = list(digits.values())
    if any(not g for g in glyphs):
        raise ValueError("Digit map glyphs must be non-empty")
    if len(set(glyphs)) != len(glyphs):
        raise ValueError("Digit map glyphs must be distinct")


DEFAULT_CONFIG = LocalizationConfig()


def build_system_prompt(config: LocalizationConfig = DEFAULT_CONFIG) -> str:
    """Fixed instruction given to the translation model, glossary included."""
    entries = ", ".join(f"{k}={v}" for k, v in config.glossary.items())
    return (
        "You are a Senior Burmese Agricultural Localization Expert. "
        "Translate to Myanmar Unicode. Convert all numbers to Myanmar numerals. "
        "Output ONLY the translated text.\n"
        f"Glossary: {entries}."
    )
