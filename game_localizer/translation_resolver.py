"""
Per-unit translation lookup with ordered fallbacks.

``TranslationResolver.resolve`` tries, in order: exact lookup, the straight
apostrophe variant, the title-case form of shout-case text, player-name
substitution, ``{ITEM}`` pattern rules and comma-separated item lists. The
first hit wins and has its ``{IFHE male|female}`` directives resolved. A unit
nothing matches is returned unchanged and reported as missing, once.
"""
import logging
import re
import threading
import unicodedata
from typing import Callable, List, Optional, Set, Tuple

from game_localizer.dictionary import TranslationDictionary
from game_localizer.host import GameHost

logger = logging.getLogger(__name__)

PLAYER_PLACEHOLDER = '{PLAYER}'
CURLY_APOSTROPHE = '’'
STRAIGHT_APOSTROPHE = "'"

# Words kept lowercase in title case unless they open the phrase
TITLE_CASE_SMALL_WORDS = {'of', 'as', 'for'}

GENDER_DIRECTIVE_REGEX = re.compile(r'\{IFHE\s+([^|{}]+?)\s*\|\s*([^{}]+?)\s*\}')
ITEM_LIST_SEPARATOR_REGEX = re.compile(r'(\s*,\s*)')
WHITESPACE_REGEX = re.compile(r'\s+')
WHITESPACE_SPLIT_REGEX = re.compile(r'(\s+)')


def is_shout_case(text: str) -> bool:
    """
    Check whether text is written entirely in capitals.

    Letters must all be uppercase; ASCII digits, punctuation and whitespace
    are allowed; at least one uppercase letter must be present.
    """
    if not text:
        return False
    text = WHITESPACE_REGEX.sub(' ', text).strip()
    if not text:
        return False

    has_upper = False
    for char in text:
        category = unicodedata.category(char)
        if category == 'Lu':
            has_upper = True
        elif char.isspace() or '0' <= char <= '9' or category.startswith('P'):
            continue
        else:
            return False
    return has_upper


def to_title_case(text: str) -> str:
    """
    Lowercase text and capitalise the first letter of each word.

    ``of``, ``as`` and ``for`` stay lowercase except at the very start.
    Whitespace between words is preserved as is.
    """
    if not text or not text.strip():
        return text

    parts = WHITESPACE_SPLIT_REGEX.split(text.lower())
    for i, part in enumerate(parts):
        if not part or part.isspace():
            continue
        if i != 0 and part in TITLE_CASE_SMALL_WORDS:
            continue
        if part[0].isalpha():
            parts[i] = part[0].upper() + part[1:]
    return ''.join(parts)


def resolve_gender_directives(text: str, is_male: Optional[bool]) -> str:
    """
    Replace every ``{IFHE male text|female text}`` with the branch for the player's gender.

    Args:
        text (str): A resolved translation.
        is_male (Optional[bool]): The player's gender; None selects the male branch.

    Returns:
        str: The text with all directives resolved.
    """
    result = text
    for match in GENDER_DIRECTIVE_REGEX.finditer(text):
        male_text = match.group(1).strip()
        female_text = match.group(2).strip()
        selected = female_text if is_male is False else male_text
        result = result.replace(match.group(0), selected)
    return result


class TranslationResolver:
    """Resolve sentence units against one immutable dictionary."""

    def __init__(self, dictionary: TranslationDictionary, host: Optional[GameHost] = None,
                 record_missing_keys: bool = True):
        self.dictionary = dictionary
        self.host = host if host is not None else GameHost()
        self.record_missing_keys = record_missing_keys
        self._missing_keys: Set[str] = set()
        self._logged_hits: Set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    @property
    def missing_keys(self) -> Set[str]:
        with self._lock:
            return set(self._missing_keys)

    # --- Host access ---

    def _ask_host(self, query: Callable[[], object], description: str):
        try:
            return query()
        except Exception as e:
            logger.error(f"Host failed to provide {description}: {e}")
            return None

    def _player_name(self) -> Optional[str]:
        return self._ask_host(self.host.get_current_player_name, "the player name")

    def _player_gender(self) -> Optional[bool]:
        return self._ask_host(self.host.get_current_player_gender, "the player gender")

    def apply_gender(self, translation: str) -> str:
        """Resolve gender directives, asking the host only when the text has one."""
        if not translation or '{IFHE' not in translation:
            return translation
        if not GENDER_DIRECTIVE_REGEX.search(translation):
            return translation
        return resolve_gender_directives(translation, self._player_gender())

    # --- Lookups ---

    def lookup(self, unit: str) -> Optional[str]:
        """Exact dictionary lookup with gender resolution, or None."""
        translated = self.dictionary.get(unit)
        if translated is None:
            return None
        return self.apply_gender(translated)

    def translate_item(self, item: str) -> str:
        """
        Restricted lookup used for the pieces of patterns and lists.

        Only the exact and title-case steps are tried, so item translation can
        never recurse into pattern or list matching. Returns the item
        unchanged when neither step finds it.
        """
        translated = self.lookup(item)
        if translated is not None:
            return translated

        if is_shout_case(item):
            translated = self.lookup(to_title_case(item))
            if translated is not None:
                return translated.upper()

        return item

    def _log_fallback_hit(self, kind: str, unit: str, translation: str) -> None:
        with self._lock:
            if (kind, unit) in self._logged_hits:
                return
            self._logged_hits.add((kind, unit))
        logger.debug(f"{kind} hit: '{unit}' -> '{translation}'")

    def _try_apostrophe(self, unit: str) -> Optional[str]:
        if CURLY_APOSTROPHE not in unit:
            return None
        return self.lookup(unit.replace(CURLY_APOSTROPHE, STRAIGHT_APOSTROPHE))

    def _try_title_case(self, unit: str) -> Optional[str]:
        if not is_shout_case(unit):
            return None
        translated = self.lookup(to_title_case(unit))
        if translated is None:
            return None
        return translated.upper()

    def _try_player_name(self, unit: str) -> Optional[str]:
        player_name = self._player_name()
        if not player_name or player_name not in unit:
            return None

        translated = self.dictionary.get(unit.replace(player_name, PLAYER_PLACEHOLDER))
        if translated is None:
            return None
        return self.apply_gender(translated.replace(PLAYER_PLACEHOLDER, player_name))

    def _match_pattern_rules(self, candidate: str, to_upper: bool) -> Optional[str]:
        for rule in self.dictionary.pattern_rules:
            captures = rule.match(candidate)
            if not captures:
                continue
            translated_items = [self.translate_item(capture) for capture in captures]
            result = self.apply_gender(rule.fill(translated_items))
            if to_upper:
                result = result.upper()
            return result
        return None

    def _try_item_pattern(self, unit: str) -> Optional[str]:
        if not self.dictionary.pattern_rules:
            return None

        result = self._match_pattern_rules(unit, to_upper=False)
        if result is None and is_shout_case(unit):
            result = self._match_pattern_rules(to_title_case(unit), to_upper=True)
        return result

    def _try_item_list(self, unit: str) -> Optional[str]:
        parts = ITEM_LIST_SEPARATOR_REGEX.split(unit)
        if len(parts) < 3:
            return None

        # Items sit at even indices, separators at odd ones
        items = [part.strip() for part in parts[::2] if part.strip()]
        if len(items) < 2:
            return None

        rebuilt: List[str] = []
        translated_count = 0
        for i, part in enumerate(parts):
            item = part.strip()
            if i % 2 == 1 or not item:
                rebuilt.append(part)
                continue
            translated_item = self.translate_item(item)
            if translated_item != item:
                translated_count += 1
            rebuilt.append(translated_item)

        if translated_count == 0:
            return None
        return self.apply_gender(''.join(rebuilt))

    # --- Missing keys ---

    def record_missing_key(self, key: str) -> bool:
        """
        Remember a key without translation and report it to the host the first time it is seen.

        Returns:
            bool: True if the key was new.
        """
        if not key or not self.record_missing_keys:
            return False

        with self._lock:
            if key in self._missing_keys:
                return False
            self._missing_keys.add(key)

        logger.warning(f"Missing translation key: '{key}'")
        try:
            self.host.report_missing_key(key)
        except Exception as e:
            logger.error(f"Host failed to record missing key '{key}': {e}")
        return True

    # --- Entry point ---

    def resolve(self, unit: str) -> str:
        """
        Translate one sentence unit.

        Args:
            unit (str): A unit produced by the sentence segmenter.

        Returns:
            str: The translation, or the unit itself when nothing matched.
        """
        if not unit:
            return unit

        translated = self.lookup(unit)
        if translated is not None:
            return translated

        fallbacks = (
            ("Apostrophe", self._try_apostrophe),
            ("Title case", self._try_title_case),
            ("Player name", self._try_player_name),
            ("Item pattern", self._try_item_pattern),
            ("Item list", self._try_item_list),
        )
        for kind, fallback in fallbacks:
            translated = fallback(unit)
            if translated is not None:
                self._log_fallback_hit(kind, unit, translated)
                return translated

        self.record_missing_key(unit)
        return unit
