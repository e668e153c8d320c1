"""
Cache warming for translations.

Pre-translates static strings (UI labels, announcement templates, crop
names) so users never hit a cold cache. Strings are cached under the
static content id, exactly where auto_translate() looks for record-less
content.

Usage:
    # CLI
    python -m agribridge.i18n.warmup config/static_strings.yaml

    # Code
    await warm_translation_cache(["Market price updated", "New preorder"])
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import yaml

from agribridge.i18n.dispatcher import (
    STATIC_CONTENT_ID,
    TranslationDispatcher,
    get_dispatcher,
)

logger = logging.getLogger(__name__)

WARMUP_FIELD = "text"


def load_static_strings(path: str | Path) -> list[str]:
    """
    Load strings from YAML.

    Accepts either a top-level list or a mapping with a "strings" list.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Static strings file not found: {path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("strings", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of strings in {path}")

    strings = [str(s).strip() for s in data if s is not None]
    # Keep order, drop empties and duplicates
    return list(dict.fromkeys(s for s in strings if s))


async def warm_translation_cache(
    strings: list[str],
    dispatcher: TranslationDispatcher | None = None,
) -> dict[str, str]:
    """
    Translate static strings into the cache.

    Returns:
        Mapping of source string to its translation
    """
    dispatcher = dispatcher or get_dispatcher()
    records = [{WARMUP_FIELD: s} for s in strings]

    translated = await dispatcher.auto_translate(records, True, STATIC_CONTENT_ID)

    results = {src[WARMUP_FIELD]: out[WARMUP_FIELD] for src, out in zip(records, translated)}
    done = sum(1 for src, out in results.items() if src != out)
    logger.info(f"Warmed translation cache: {done}/{len(strings)} strings translated")
    return results


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python -m agribridge.i18n.warmup STRINGS_YAML")
        return 2

    logging.basicConfig(level=logging.INFO)
    strings = load_static_strings(argv[0])
    results = asyncio.run(warm_translation_cache(strings))
    for source, target in results.items():
        print(f"  {source} -> {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
