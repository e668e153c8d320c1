"""
Shared utility functions.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone


def generate_id() -> str:
    """
    Generate a record id.

    Returns:
        24 lowercase hex characters, the same shape as a Mongo ObjectId,
        so localization treats it as an identifier.
    """
    return secrets.token_hex(12)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
