"""
LLM client configuration using DSPy.

Supports Groq (primary), Gemini, OpenAI, and Anthropic.
"""

from __future__ import annotations

from functools import lru_cache

import dspy

from agribridge.config import get_settings


@lru_cache
def get_lm(provider: str | None = None, model: str | None = None) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'groq', 'gemini', 'openai', or 'anthropic'. Defaults to LLM_PROVIDER.
        model: Model name. Defaults to the provider-specific setting.

    Returns:
        Configured DSPy LM instance (deterministic, temperature 0).
    """
    settings = get_settings()
    provider = provider or settings.llm_provider

    if provider == "groq":
        model = model or settings.groq_model
        api_key = settings.groq_api_key
        if not api_key:
            raise ValueError("GROQ_API_KEY not set")

    elif provider == "gemini":
        model = model or settings.gemini_model
        api_key = settings.google_api_key
        if not api_key:
            raise ValueError("GOOGLE_API_KEY not set")

    elif provider == "openai":
        model = model or settings.openai_model
        api_key = settings.openai_api_key
        if not api_key:
            raise ValueError("OPENAI_API_KEY not set")

    elif provider == "anthropic":
        model = model or settings.anthropic_model
        api_key = settings.anthropic_api_key
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")

    else:
        raise ValueError(f"Unknown provider: {provider}")

    # litellm routing prefix
    return dspy.LM(
        model=f"{provider}/{model}",
        api_key=api_key,
        temperature=0.0,
    )


def configure_lm(provider: str | None = None, model: str | None = None) -> None:
    """Configure DSPy with the specified LM as default."""
    lm = get_lm(provider, model)
    dspy.configure(lm=lm)
