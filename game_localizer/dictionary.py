"""
Immutable translation dictionary and the ``{ITEM}`` pattern rules derived from it.

A dictionary is built once per language pack and never mutated afterwards,
so any number of threads may read it without locking.
"""
import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from game_localizer.translation_validator import count_item_placeholders, validate_entries

logger = logging.getLogger(__name__)

ITEM_PLACEHOLDER = '{ITEM}'
ESCAPED_NEWLINE = '\\n'


@dataclass(frozen=True)
class PatternRule:
    """A dictionary entry whose key holds ``{ITEM}`` placeholders, compiled to a full-match regex."""
    key: str
    regex: re.Pattern
    template: str
    item_count: int

    def match(self, text: str) -> Optional[Tuple[str, ...]]:
        """Return the captured item texts, or None when the rule does not match."""
        match = self.regex.fullmatch(text)
        if match is None:
            return None
        return match.groups()

    def fill(self, translated_items: Sequence[str]) -> str:
        """Substitute the items into the translated template, one ``{ITEM}`` at a time, left to right."""
        result = self.template
        for item in translated_items:
            index = result.find(ITEM_PLACEHOLDER)
            if index < 0:
                break
            result = result[:index] + item + result[index + len(ITEM_PLACEHOLDER):]
        return result


def build_pattern_rule(key: str, template: str) -> PatternRule:
    """
    Compile a pattern rule from an ``{ITEM}``-bearing key.

    Each ``{ITEM}`` becomes a lazy capture group ``(.+?)``; the literal text
    around it is escaped.
    """
    pieces = key.split(ITEM_PLACEHOLDER)
    pattern = '(.+?)'.join(re.escape(piece) for piece in pieces)
    return PatternRule(
        key=key,
        regex=re.compile(pattern),
        template=template,
        item_count=len(pieces) - 1
    )


class TranslationDictionary:
    """Read-only exact-match table plus the ordered list of pattern rules."""

    def __init__(self, entries: Mapping[str, str], pattern_rules: Iterable[PatternRule] = ()):
        self._entries = MappingProxyType(dict(entries))
        self._pattern_rules = tuple(pattern_rules)

    @property
    def entries(self) -> Mapping[str, str]:
        return self._entries

    @property
    def pattern_rules(self) -> Tuple[PatternRule, ...]:
        return self._pattern_rules

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TranslationDictionary(entries={len(self._entries)}, pattern_rules={len(self._pattern_rules)})"


def load_dictionary(entries: Iterable[Tuple[str, str]]) -> TranslationDictionary:
    """
    Build the exact-match table and the derived ``{ITEM}`` pattern rules.

    The first occurrence of a key wins; later duplicates are ignored. A literal
    ``\\n`` in a translation becomes a real newline. Entries are checked with
    the translation validator and problems are logged as warnings; an
    ``{ITEM}`` key whose translation carries a different number of ``{ITEM}``
    placeholders gets no pattern rule.

    Args:
        entries (Iterable[Tuple[str, str]]): (original, translation) pairs in load order.

    Returns:
        TranslationDictionary: The immutable dictionary.
    """
    table = {}
    duplicates = 0
    for original, translation in entries:
        if not original:
            continue
        if original in table:
            duplicates += 1
            continue
        table[original] = (translation or '').replace(ESCAPED_NEWLINE, '\n')

    problems = validate_entries(table.items())
    for problem in problems:
        logger.warning(problem)
    if problems:
        logger.warning(f"Found {len(problems)} problem(s) in dictionary entries; the entries are still loaded.")

    pattern_rules: List[PatternRule] = []
    for original, translation in table.items():
        if ITEM_PLACEHOLDER not in original:
            continue
        item_count = count_item_placeholders(original)
        if count_item_placeholders(translation) != item_count:
            logger.warning(f"Skipping pattern rule for '{original}': key has {item_count} {{ITEM}} "
                           f"placeholder(s) but translation '{translation}' has "
                           f"{count_item_placeholders(translation)}.")
            continue
        pattern_rules.append(build_pattern_rule(original, translation))

    if duplicates:
        logger.debug(f"Ignored {duplicates} duplicate dictionary key(s).")
    logger.info(f"Built dictionary with {len(table)} entries and {len(pattern_rules)} {{ITEM}} pattern rules.")
    return TranslationDictionary(table, pattern_rules)


def load_dictionary_sources(sources: Mapping[str, Iterable[Tuple[str, str]]]) -> TranslationDictionary:
    """
    Build one dictionary from several sources, e.g. one per CSV file of a language pack.

    Sources are read in sorted identifier order so that the first-key-wins
    rule gives the same result however the sources were discovered.
    """
    def ordered_entries():
        for source_id in sorted(sources):
            logger.debug(f"Loading dictionary source '{source_id}'")
            yield from sources[source_id]

    return load_dictionary(ordered_entries())
