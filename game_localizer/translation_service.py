"""
Entry point called by the game integration for every displayed string.

The service owns the state of the active language: its dictionary, the
resolver built on it and the output cache. That state is published as one
immutable object, so switching languages is a single reference swap and
concurrent ``process`` calls always see a consistent dictionary and cache.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from game_localizer.app_config import LocalizerConfig
from game_localizer.dictionary import TranslationDictionary, load_dictionary
from game_localizer.host import GameHost, MissingKeyLedger
from game_localizer.sentence_segmenter import parse
from game_localizer.template_builder import apply_template, build_template
from game_localizer.translation_cache import TranslationCache
from game_localizer.translation_resolver import TranslationResolver

logger = logging.getLogger(__name__)

VERSE_LINE_COUNT = 4
LINE_SPLIT_REGEX = re.compile(r'\r?\n')
LETTER_REGEX = re.compile(r'[^\W\d_]')


@dataclass(frozen=True)
class LanguageState:
    """Everything that belongs to one active language pack."""
    language_code: str
    dictionary: TranslationDictionary
    resolver: TranslationResolver
    cache: TranslationCache


class TranslationService:
    """
    Translate raw game strings for the active language.

    Until a language is activated, and after it is deactivated, ``process``
    returns its input unchanged.
    """

    def __init__(self, host: Optional[GameHost] = None, record_missing_keys: bool = True):
        self.host = host if host is not None else GameHost()
        self.record_missing_keys = record_missing_keys
        self._state: Optional[LanguageState] = None

    @property
    def is_active(self) -> bool:
        return self._state is not None

    @property
    def language_code(self) -> Optional[str]:
        state = self._state
        return state.language_code if state is not None else None

    @property
    def state(self) -> Optional[LanguageState]:
        return self._state

    def activate_language(self, entries: Iterable[Tuple[str, str]], language_code: str) -> LanguageState:
        """
        Build the dictionary for a language pack and make it the active one.

        The previous language's cache and missing-key set are discarded with it.

        Args:
            entries: (original, translation) pairs in deterministic load order.
            language_code: Tag of the language pack, used for logging.

        Returns:
            LanguageState: The newly published state.
        """
        dictionary = entries if isinstance(entries, TranslationDictionary) else load_dictionary(entries)
        state = LanguageState(
            language_code=language_code,
            dictionary=dictionary,
            resolver=TranslationResolver(dictionary, self.host, self.record_missing_keys),
            cache=TranslationCache()
        )
        self._state = state
        logger.info(f"Activated language '{language_code}' with {len(dictionary)} entries.")
        return state

    def deactivate_language(self) -> None:
        previous = self._state
        self._state = None
        if previous is not None:
            logger.info(f"Deactivated language '{previous.language_code}'.")

    def clear_cache(self) -> None:
        """Forget memoised outputs, e.g. after the player's name or gender changed."""
        state = self._state
        if state is not None:
            state.cache.clear()

    def process(self, text: str) -> str:
        """
        Translate a raw game string.

        Never raises: if anything goes wrong the input is returned unchanged
        and remembered as its own translation.

        Args:
            text (str): The string the game is about to display.

        Returns:
            str: The translated string.
        """
        state = self._state
        if state is None or not text:
            return text

        cached = state.cache.get(text)
        if cached is not None:
            return cached

        try:
            result = self._translate(state, text)
        except Exception:
            logger.exception(f"Translation failed for input '{text}', returning it unchanged")
            result = text

        return state.cache.publish(text, result)

    def _translate(self, state: LanguageState, text: str) -> str:
        verse = self._translate_verse(state, text)
        if verse is not None:
            return verse

        units = parse(text)
        if not units:
            return text

        template = build_template(text, units)
        translated_units = [state.resolver.resolve(unit) for unit in units]
        result = apply_template(template, translated_units)

        if result == text and translated_units != units:
            # Segmentation rewrote the text (directives, newlines) so no unit could be anchored
            if len(translated_units) == 1:
                result = translated_units[0]
            else:
                result = '\n'.join(translated_units)
            logger.debug(f"Template fallback for '{text}' -> '{result}'")

        return result

    def _translate_verse(self, state: LanguageState, text: str) -> Optional[str]:
        """Translate a four-line poem line by line, keeping its line breaks."""
        if '\n' not in text:
            return None

        lines: List[str] = []
        for line in LINE_SPLIT_REGEX.split(text):
            line = line.strip()
            if line and LETTER_REGEX.search(line):
                lines.append(line)

        if len(lines) != VERSE_LINE_COUNT:
            return None

        translated_lines = []
        translated_count = 0
        for line in lines:
            translated = state.resolver.lookup(line)
            if translated is None:
                translated_lines.append(line)
            else:
                translated_count += 1
                translated_lines.append(translated)

        if translated_count == 0:
            return None

        logger.debug(f"Verse translated ({translated_count}/{VERSE_LINE_COUNT} lines): '{text}'")
        return '\n'.join(translated_lines)


def create_translation_service(config: LocalizerConfig, host: Optional[GameHost] = None) -> TranslationService:
    """
    Wire a service from the application configuration.

    When no host is given, a default one writing missing keys to the
    configured ledger file is used.
    """
    if host is None:
        ledger = MissingKeyLedger(config.missing_keys_file_path, dry_run=config.dry_run)
        host = GameHost(missing_key_ledger=ledger)
    return TranslationService(host=host, record_missing_keys=config.record_missing_keys)
