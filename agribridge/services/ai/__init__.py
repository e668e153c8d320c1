"""
AI services using DSPy.

DSPy provides a structured way to define AI behaviors as "signatures"
that can be optimized and tested.
"""

from agribridge.services.ai.client import get_lm, configure_lm

__all__ = [
    "get_lm",
    "configure_lm",
]
