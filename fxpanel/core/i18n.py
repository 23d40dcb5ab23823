"""
Internationalization (i18n) Engine

Renders all user-facing panel text from a keyed phrase catalog.

Catalogs are nested JSON objects flattened to dot-delimited keys. Phrases use
``%{name}`` placeholders; a phrase with ``||||``-separated variants is picked
by the ``smart_count`` substitution according to the locale's plural rule.

The active ``TranslationEngine`` is immutable. Reconfiguration builds a new
one completely and swaps a single reference, so readers always see either
the old or the new catalog. A missing key never raises: it is logged and the
key itself is returned.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Protocol, Union

from fxpanel.domain.exceptions import BootFatalError, ExitCode, FatalCondition, LocaleLoadError

from .locale_map import get_locale_map

logger = logging.getLogger(__name__)


# GB instead of US for the date/time formats
DEFAULT_CANONICAL_LOCALE = "en-GB"
CUSTOM_LANGUAGE = "custom"
CUSTOM_LOCALE_FILENAME = "locale.json"

PLURAL_DELIMITER = "||||"
_PLACEHOLDER_RE = re.compile(r"%\{(.*?)\}")
_LOCALE_RE = re.compile(
    r"^(?P<language>[a-z]{2,3}|[a-z]{5,8})"
    r"(?:-(?P<script>[a-z]{4}))?"
    r"(?:-(?P<region>[a-z]{2}|\d{3}))?"
    r"(?P<variants>(?:-(?:[a-z0-9]{5,8}|\d[a-z0-9]{3}))*)$",
    re.IGNORECASE,
)


def _plural_chinese(n: float) -> int:
    return 0


def _plural_german(n: float) -> int:
    return 0 if n == 1 else 1


def _plural_french(n: float) -> int:
    return 1 if n > 1 else 0


def _plural_russian(n: float) -> int:
    last_two = n % 100
    last = n % 10
    if last == 1 and last_two != 11:
        return 0
    if 2 <= last <= 4 and not 12 <= last_two <= 14:
        return 1
    return 2


def _plural_czech(n: float) -> int:
    if n == 1:
        return 0
    return 1 if 2 <= n <= 4 else 2


def _plural_polish(n: float) -> int:
    if n == 1:
        return 0
    last_two = n % 100
    return 1 if 2 <= n % 10 <= 4 and not 12 <= last_two <= 14 else 2


def _plural_arabic(n: float) -> int:
    if n < 3:
        return int(n)
    last_two = n % 100
    if 3 <= last_two <= 10:
        return 3
    return 4 if last_two >= 11 else 5


PLURAL_RULES: dict[str, Callable[[float], int]] = {
    "chinese": _plural_chinese,
    "german": _plural_german,
    "french": _plural_french,
    "russian": _plural_russian,
    "czech": _plural_czech,
    "polish": _plural_polish,
    "arabic": _plural_arabic,
}

PLURAL_TYPE_LANGUAGES = {
    "chinese": ("fa", "id", "ja", "ko", "lo", "ms", "th", "tr", "zh", "vi"),
    "french": ("fr", "tl", "pt-BR"),
    "russian": ("ru", "uk", "be", "bs", "hr", "sr"),
    "czech": ("cs", "sk"),
    "polish": ("pl",),
    "arabic": ("ar",),
}


def plural_type_for(locale: str) -> str:
    """Plural rule family for a canonical locale; German-style by default."""
    language = locale.split("-")[0]
    for plural_type, languages in PLURAL_TYPE_LANGUAGES.items():
        if locale in languages:
            return plural_type
    for plural_type, languages in PLURAL_TYPE_LANGUAGES.items():
        if language in languages:
            return plural_type
    return "german"


def canonicalize_locale(language_id: str) -> str:
    """
    Canonicalize a language id to a BCP 47 tag (``pt_br`` -> ``pt-BR``).

    Raises:
        ValueError: If the id is not a well-formed language tag.
    """
    if not isinstance(language_id, str):
        raise ValueError(f"Invalid language tag: {language_id!r}")
    match = _LOCALE_RE.match(language_id.replace("_", "-"))
    if match is None:
        raise ValueError(f"Invalid language tag: {language_id!r}")

    parts = [match.group("language").lower()]
    if match.group("script"):
        parts.append(match.group("script").title())
    if match.group("region"):
        parts.append(match.group("region").upper())
    variants = match.group("variants")
    if variants:
        parts.extend(v.lower() for v in variants.strip("-").split("-"))
    return "-".join(parts)


def flatten_phrases(phrases: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten a nested phrase mapping into dot-delimited keys."""
    flat: dict[str, str] = {}
    for key, value in phrases.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_phrases(value, full_key))
        elif value is not None:
            flat[full_key] = value if isinstance(value, str) else str(value)
    return flat


def interpolate(phrase: str, substitutions: Mapping[str, Any]) -> str:
    """Replace ``%{name}`` placeholders; unknown placeholders are kept as-is."""
    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in substitutions and substitutions[name] is not None:
            return str(substitutions[name])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(replace, phrase)


def choose_plural_form(phrase: str, locale: str, count: Union[int, float]) -> str:
    """Pick the ``||||``-separated variant for ``count``."""
    variants = [v.strip() for v in phrase.split(PLURAL_DELIMITER)]
    if len(variants) == 1:
        return variants[0]
    rule = PLURAL_RULES[plural_type_for(locale)]
    # Fractional counts go through the rule as-is (1.5 is plural)
    index = int(rule(abs(count)))
    return variants[index] if index < len(variants) else variants[0]


MissingKeyPolicy = Callable[[str], str]


@dataclass(frozen=True)
class TranslationEngine:
    """
    Immutable translation state: locale, flat catalog and missing-key policy.
    """

    canonical_locale: str
    language: str
    catalog: Mapping[str, str]
    missing_key_policy: MissingKeyPolicy

    @classmethod
    def build(
        cls,
        language: str,
        canonical_locale: str,
        phrases: Mapping[str, Any],
        missing_key_policy: MissingKeyPolicy,
    ) -> TranslationEngine:
        return cls(
            canonical_locale=canonical_locale,
            language=language,
            catalog=MappingProxyType(flatten_phrases(phrases)),
            missing_key_policy=missing_key_policy,
        )

    def translate(
        self,
        key: str,
        substitutions: Optional[Union[Mapping[str, Any], int, float]] = None,
    ) -> str:
        # A bare number is shorthand for smart_count
        if isinstance(substitutions, (int, float)) and not isinstance(substitutions, bool):
            substitutions = {"smart_count": substitutions}
        substitutions = substitutions or {}

        phrase = self.catalog.get(key)
        if phrase is None:
            return self.missing_key_policy(key)

        count = substitutions.get("smart_count")
        if isinstance(count, (int, float)) and not isinstance(count, bool):
            phrase = choose_plural_form(phrase, self.canonical_locale, count)
        return interpolate(phrase, substitutions)


class ConvarRefresher(Protocol):
    """Process supervisor that re-renders host convars from translated text."""

    def reset_convars(self) -> None:
        ...


class LocalizationEngine:
    """
    Owns the active translation engine.

    Args:
        data_path: Data root; the custom catalog lives at ``<data_path>/locale.json``.
        language_provider: Current language id, or a callable returning it
            (read again on every ``reconfigure``).
        supervisor: Notified after a reconfiguration.
        builtin_catalogs: Built-in catalogs; the shipped locale map by default.

    Raises:
        BootFatalError: If the initial catalog cannot be loaded.
    """

    def __init__(
        self,
        data_path: Union[str, Path],
        language_provider: Union[str, Callable[[], str]],
        supervisor: Optional[ConvarRefresher] = None,
        builtin_catalogs: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ):
        self.custom_locale_path = Path(data_path) / CUSTOM_LOCALE_FILENAME
        if not callable(language_provider):
            language = language_provider
            language_provider = lambda: language
        self._language_provider = language_provider
        self._supervisor = supervisor
        self._builtin_catalogs = builtin_catalogs
        self._engine: Optional[TranslationEngine] = None

        self.configure(self._language_provider(), is_first_load=True)

    @property
    def engine(self) -> TranslationEngine:
        if self._engine is None:
            raise RuntimeError("translation engine not yet loaded")
        return self._engine

    @property
    def canonical_locale(self) -> str:
        return self.engine.canonical_locale

    @property
    def language(self) -> str:
        return self.engine.language

    def _missing_key(self, key: str) -> str:
        logger.error(f"[{type(self).__name__}] Missing key '{key}' from translation file.")
        return key

    def get_language_phrases(self, language: str) -> Mapping[str, Any]:
        """
        Load the phrases of a language.

        Raises:
            LocaleLoadError: Unknown language, or unreadable custom file.
        """
        if not isinstance(language, str):
            raise LocaleLoadError(f"Language id must be a string, got {language!r}.")

        builtin = self._builtin_catalogs
        if builtin is None:
            builtin = get_locale_map()

        if isinstance(builtin.get(language), Mapping):
            return builtin[language]

        if language == CUSTOM_LANGUAGE:
            try:
                with open(self.custom_locale_path, "r", encoding="utf-8") as f:
                    phrases = json.load(f)
            except (OSError, ValueError, RecursionError) as e:
                raise LocaleLoadError(f"Failed to load '{self.custom_locale_path}'. ({e})") from e
            if not isinstance(phrases, Mapping):
                raise LocaleLoadError(
                    f"Failed to load '{self.custom_locale_path}'. (root is not an object)"
                )
            return phrases

        raise LocaleLoadError(f"Language '{language}' not found.")

    def configure(self, language: str, is_first_load: bool = False) -> bool:
        """
        Build and activate a translation engine for ``language``.

        Returns:
            bool: True if the new engine was activated; False if loading failed
            and the previous engine was kept.

        Raises:
            BootFatalError: If loading fails on the first configuration.
        """
        try:
            canonical = canonicalize_locale(language)
        except ValueError:
            logger.debug(f"Could not canonicalize '{language}', using {DEFAULT_CANONICAL_LOCALE}")
            canonical = DEFAULT_CANONICAL_LOCALE

        try:
            phrases = self.get_language_phrases(language)
            try:
                engine = TranslationEngine.build(
                    language=language,
                    canonical_locale=canonical,
                    phrases=phrases,
                    missing_key_policy=self._missing_key,
                )
            except Exception as e:
                raise LocaleLoadError(f"Failed to build catalog for {language!r}. ({e!r})") from e
        except LocaleLoadError as e:
            if is_first_load:
                raise BootFatalError(FatalCondition(
                    code=ExitCode.LOCALE_LOAD_FAILED,
                    message="Failed to load initial language file",
                    details=(str(e),),
                )) from e
            logger.error(f"Failed to load language '{language}', keeping '{self.language}': {e}")
            return False

        self._engine = engine
        logger.info(f"Loaded translations for {language} ({canonical})")
        return True

    def reconfigure(self) -> bool:
        """
        Reload the language from configuration and refresh the supervisor.

        Returns:
            bool: True if a new engine was activated.
        """
        activated = self.configure(self._language_provider(), is_first_load=False)

        if self._supervisor is not None:
            try:
                self._supervisor.reset_convars()
            except Exception as e:
                logger.warning(f"Failed to refresh server convars after language change: {e}")

        return activated

    def translate(
        self,
        key: str,
        substitutions: Optional[Union[Mapping[str, Any], int, float]] = None,
    ) -> str:
        """
        Translate a key. Never raises; returns the key on any failure.

        Args:
            key: Dot-delimited phrase key
            substitutions: Placeholder values, or a number used as ``smart_count``
        """
        engine = self._engine
        if engine is None:
            logger.error(f"Translation requested before any catalog was loaded: '{key}'")
            return key
        try:
            return engine.translate(key, substitutions)
        except Exception as e:
            logger.error(f"Error performing a translation with key '{key}': {e}")
            return key

    t = translate

    def has_key(self, key: str) -> bool:
        return key in self.engine.catalog
