"""
External translation model.

The dispatcher only depends on the TranslationBackend interface; the DSPy
implementation below is what production uses. Tests plug in fakes.
"""

from __future__ import annotations

import asyncio
import json
import re
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor

import dspy

from agribridge.i18n.glossary import DEFAULT_CONFIG, LocalizationConfig, build_system_prompt


class TranslationError(Exception):
    """The model returned nothing usable."""


# =============================================================================
# DSPy Signature
# =============================================================================


class LocalizeText(dspy.Signature):
    """Translate agricultural marketplace text into Myanmar Unicode."""

    text: str = dspy.InputField(desc="English text to translate")

    translated_text: str = dspy.OutputField(desc="Myanmar translation, text only")


# =============================================================================
# Output Cleanup
# =============================================================================


_FENCE = re.compile(r"^```[\w-]*\s*|\s*```$")
_QUOTES = ('"', "'", "“", "”", "「", "」")


def clean_model_output(raw: str) -> str:
    """
    Normalize a model reply to plain text.

    Replies are expected to be plain text, but code fences, wrapping quotes
    and {"translation": ...} style JSON are tolerated.
    """
    text = _FENCE.sub("", (raw or "").strip()).strip()

    if text.startswith("{") and text.endswith("}"):
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, dict):
            for key in ("translation", "translated_text", "text", "output"):
                if isinstance(data.get(key), str):
                    text = data[key].strip()
                    break

    if len(text) >= 2 and text[0] in _QUOTES and text[-1] in _QUOTES:
        text = text[1:-1].strip()

    return text


# =============================================================================
# Backends
# =============================================================================


class TranslationBackend(ABC):
    """Anything that can turn one source phrase into a target phrase."""

    @abstractmethod
    async def translate(self, text: str) -> str:
        """
        Translate a single phrase.

        Raises:
            Exception: Any failure; the dispatcher treats it as "untranslated".
        """
        pass


class DSPyTranslationBackend(TranslationBackend):
    """
    LLM-backed translator.

    The system instruction is fixed per config and enumerates the glossary.
    DSPy calls block, so they run on a private pool of max_workers threads.
    A call abandoned by a timeout keeps its thread until the model answers,
    so the pool size is the hard cap on concurrent model requests.
    """

    def __init__(
        self,
        config: LocalizationConfig = DEFAULT_CONFIG,
        lm: dspy.LM | None = None,
        max_workers: int = 8,
    ):
        self.config = config
        self.instructions = build_system_prompt(config)
        self._lm = lm
        self._module: dspy.Predict | None = None
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="llm")

    @property
    def lm(self) -> dspy.LM:
        if self._lm is None:
            from agribridge.services.ai.client import get_lm
            self._lm = get_lm()
        return self._lm

    @property
    def module(self) -> dspy.Predict:
        if self._module is None:
            self._module = dspy.Predict(LocalizeText.with_instructions(self.instructions))
        return self._module

    def _translate_sync(self, text: str) -> str:
        with dspy.context(lm=self.lm):
            result = self.module(text=text)
        return result.translated_text

    async def translate(self, text: str) -> str:
        loop = asyncio.get_running_loop()
        raw = await loop.run_in_executor(self._executor, self._translate_sync, text)
        translated = clean_model_output(raw)
        if not translated:
            raise TranslationError(f"Empty translation for {text[:40]!r}")
        return translated
