"""
Number formatting and numeral transliteration.

format_number() renders a value the way the English UI shows it (thousands
separators, calendar years left alone). transliterate_numerals() turns a
value into its Myanmar rendering: glossary phrases first, then digits.
"""

from __future__ import annotations

import re
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from functools import lru_cache
from typing import Any

from agribridge.i18n.classify import looks_like_object_id
from agribridge.i18n.glossary import DEFAULT_CONFIG, LocalizationConfig


NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

YEAR_RANGE = (1000, 2100)

# Longer numbers are shown as written, not grouped
MAX_GROUPED_DIGITS = 1000
_THOUSANDTHS = Decimal("0.001")


# =============================================================================
# Number Formatting
# =============================================================================


def _render(value: Any) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)


def parse_number(text: str) -> Decimal | None:
    """Parse a plain decimal literal (commas ignored), or None."""
    text = text.strip().replace(",", "")
    if not NUMERIC_PATTERN.match(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def is_numeric_text(text: str) -> bool:
    return parse_number(text) is not None


def format_number(value: Any) -> str:
    """
    Render a number with thousands separators.

    Bare 4-digit tokens between 1000 and 2100 are treated as years and left
    ungrouped. Non-numeric text, and numbers with MAX_GROUPED_DIGITS or more
    integer digits, are returned unchanged. At most three fractional digits
    are kept.

        format_number(12345)    -> "12,345"
        format_number("2025")   -> "2025"
        format_number("1,500")  -> "1,500"
    """
    text = _render(value)
    plain = text.strip().replace(",", "")
    number = parse_number(plain)
    if number is None:
        return text

    low, high = YEAR_RANGE
    if len(plain) == 4 and low <= number <= high:
        return plain

    if number.adjusted() >= MAX_GROUPED_DIGITS:
        return text

    # Room for every integer digit plus three decimals, so quantize cannot trap
    context = Context(prec=max(number.adjusted(), 0) + 10)
    rounded = number.quantize(_THOUSANDTHS, rounding=ROUND_HALF_UP, context=context)
    grouped = format(rounded, ",f")
    if "." in grouped:
        grouped = grouped.rstrip("0").rstrip(".")
    if grouped == "-0":
        grouped = "0"
    return grouped


# =============================================================================
# Transliteration
# =============================================================================


@lru_cache(maxsize=32)
def _glossary_pattern(config: LocalizationConfig) -> re.Pattern[str] | None:
    keys = config.sorted_glossary_keys
    if not keys:
        return None
    # Alternation is tried left to right, so longest keys win.
    # Latin letters on either side mean the key is part of a longer word.
    alternation = "|".join(re.escape(k) for k in keys)
    return re.compile(rf"(?<![A-Za-z])(?:{alternation})(?![A-Za-z])", re.IGNORECASE)


@lru_cache(maxsize=32)
def _digit_table(config: LocalizationConfig) -> dict[int, str]:
    return str.maketrans(dict(config.digits))


def apply_glossary(text: str, config: LocalizationConfig = DEFAULT_CONFIG) -> str:
    """Replace every glossary phrase in text, case-insensitively."""
    pattern = _glossary_pattern(config)
    if pattern is None:
        return text
    return pattern.sub(lambda m: config.lookup(m.group(0)) or m.group(0), text)


def to_target_digits(text: str, config: LocalizationConfig = DEFAULT_CONFIG) -> str:
    """Swap ASCII digits for target-script digits. Everything else passes through."""
    return text.translate(_digit_table(config))


def transliterate_numerals(value: Any, config: LocalizationConfig = DEFAULT_CONFIG) -> str:
    """
    Render a string or number in the target locale.

    Numbers are grouped first. Strings that look like database ids are
    returned as-is. Glossary phrases are substituted before digits so that
    digits inside glossary output are converted too.
    """
    if value is None:
        return ""

    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        text = format_number(value)
    else:
        text = str(value)

    if looks_like_object_id(text.replace(",", "")):
        return text

    return to_target_digits(apply_glossary(text, config), config)
