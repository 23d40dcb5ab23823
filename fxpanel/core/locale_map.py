"""
Built-in Locale Map

Indexes the phrase catalogs shipped in ``fxpanel/locales``. Each JSON file
is one language, keyed by its file stem (``en.json`` -> ``en``).
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


@lru_cache(maxsize=1)
def get_locale_map() -> Mapping[str, Mapping[str, Any]]:
    """
    Load every built-in catalog.

    Returns:
        Mapping: Language id to raw (nested) phrase mapping.
    """
    catalogs: dict[str, Mapping[str, Any]] = {}
    for locale_file in sorted(LOCALES_DIR.glob("*.json")):
        with open(locale_file, "r", encoding="utf-8") as f:
            catalogs[locale_file.stem] = MappingProxyType(json.load(f))
    logger.debug(f"Loaded {len(catalogs)} built-in locales from {LOCALES_DIR}")
    return MappingProxyType(catalogs)


def get_language_labels() -> dict[str, str]:
    """
    Get display labels of the built-in languages.

    Returns:
        dict: Language id to label from the catalog's ``$meta`` block
    """
    return {
        lang: phrases.get("$meta", {}).get("label", lang)
        for lang, phrases in get_locale_map().items()
    }
