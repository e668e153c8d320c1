"""
Field and value classification.

Decides which parts of a payload are eligible for localization. Each rule
is a separate predicate so it can be tested and swapped on its own; the
traversals only ever call classify_key(), is_literal_value() and kind_of().
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable


OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

# Keys that are always technical, whatever their suffix
IDENTIFIER_KEYS = frozenset({"id", "_id", "__v"})

# Keys ending in "at" that are not timestamps
AT_SUFFIX_EXEMPT_KEYS = frozenset({"unit"})

# Extended-JSON wrappers emitted for Mongo values
OPAQUE_WRAPPER_KEYS = frozenset({"$oid", "$date"})


# =============================================================================
# Value Kinds
# =============================================================================


class ValueKind(str, Enum):
    """Closed set of shapes a localizable value can take."""

    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    OPAQUE = "opaque"


def is_opaque(value: Any) -> bool:
    """Dates, UUIDs, ObjectIds and extended-JSON wrappers are never rewritten."""
    if isinstance(value, (datetime, date, time, uuid.UUID)):
        return True
    if isinstance(value, Mapping):
        return any(k in value for k in OPAQUE_WRAPPER_KEYS)
    # bson.ObjectId and friends, without importing bson
    return getattr(value, "_type_marker", None) is not None or type(value).__name__ == "ObjectId"


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded value. Unknown types are treated as opaque."""
    if value is None:
        return ValueKind.NULL
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if is_opaque(value):
        return ValueKind.OPAQUE
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    return ValueKind.OPAQUE


# =============================================================================
# Field Kinds
# =============================================================================


class FieldKind(str, Enum):
    """Classification of an object key."""

    IDENTIFIER = "identifier"
    DATETIME = "datetime"
    EMAIL = "email"
    ORDINARY = "ordinary"


def is_identifier_key(key: str) -> bool:
    lower = key.lower()
    return lower in IDENTIFIER_KEYS or lower.endswith("id")


def is_datetime_key(key: str) -> bool:
    lower = key.lower()
    if "date" in lower or "time" in lower:
        return True
    return lower.endswith("at") and lower not in AT_SUFFIX_EXEMPT_KEYS


def is_email_key(key: str) -> bool:
    return "email" in key.lower()


def classify_key(key: str) -> FieldKind:
    """Classify an object key by name alone."""
    if is_identifier_key(key):
        return FieldKind.IDENTIFIER
    if is_datetime_key(key):
        return FieldKind.DATETIME
    if is_email_key(key):
        return FieldKind.EMAIL
    return FieldKind.ORDINARY


# =============================================================================
# Value Literals
# =============================================================================


def looks_like_object_id(text: str) -> bool:
    """24 hex characters: indistinguishable from a database id."""
    return bool(OBJECT_ID_PATTERN.match(text))


def is_literal_value(text: str, cdn_prefixes: Iterable[str] = ()) -> bool:
    """CDN URLs and "#" colour codes/anchors are kept verbatim."""
    if text.startswith("#"):
        return True
    return any(text.startswith(prefix) for prefix in cdn_prefixes)
