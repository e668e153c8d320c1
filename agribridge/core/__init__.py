"""
Core helpers shared across services.
"""

from agribridge.core.utils import generate_id, utc_now

__all__ = [
    "generate_id",
    "utc_now",
]
