import re
from collections import Counter
from typing import Iterable, List, Tuple

# Tokens the game substitutes at runtime; a translation must carry the same ones as its key.
RUNTIME_PLACEHOLDER_REGEX = re.compile(r'\{(ITEM|PLAYER|MONEY)\}')
GENDER_DIRECTIVE_START_REGEX = re.compile(r'\{IFHE\b')
GENDER_DIRECTIVE_REGEX = re.compile(r'\{IFHE\s+[^|{}]+?\s*\|\s*[^{}]+?\s*\}')


def check_placeholder_parity(base_string: str, target_string: str) -> bool:
    """
    Checks if the runtime placeholders are identical between a dictionary key and its translation.
    Placeholders are ``{ITEM}``, ``{PLAYER}`` and ``{MONEY}``; reordering is allowed.

    Args:
        base_string: The original game text (dictionary key).
        target_string: The translated text.

    Returns:
        True if both strings carry the same multiset of placeholders, False otherwise.
    """
    base_placeholders = Counter(RUNTIME_PLACEHOLDER_REGEX.findall(base_string))
    target_placeholders = Counter(RUNTIME_PLACEHOLDER_REGEX.findall(target_string))

    return base_placeholders == target_placeholders


def count_item_placeholders(text: str) -> int:
    return text.count('{ITEM}')


def check_gender_directives(text: str) -> List[str]:
    """
    Checks that every ``{IFHE`` directive in a translation is well formed.

    A well-formed directive looks like ``{IFHE male text|female text}``.

    Args:
        text: The translated text.

    Returns:
        A list of string error messages. An empty list means every directive is valid.
    """
    errors = []
    for start_match in GENDER_DIRECTIVE_START_REGEX.finditer(text):
        if not GENDER_DIRECTIVE_REGEX.match(text, start_match.start()):
            snippet = text[start_match.start():start_match.start() + 40]
            errors.append(f"Malformed gender directive near '{snippet}'. Expected '{{IFHE male|female}}'.")
    return errors


def check_mojibake(text: str) -> List[str]:
    """
    Checks a string for common mojibake patterns.

    Args:
        text: The string to check.

    Returns:
        A list of string error messages. An empty list means the string looks clean.
    """
    errors = []

    # 'Ã' followed by a character in 0x80-0xFF is UTF-8 text that was decoded as latin-1 or cp1252.
    mojibake_pattern = re.compile(r'Ã[\x80-\xff]')
    if mojibake_pattern.search(text):
        errors.append(f"Potential mojibake detected in '{text}'. Found patterns like 'Ã¼', 'Ã¤', etc.")

    if '�' in text:
        errors.append(f"'{text}' contains the Unicode replacement character (�), "
                      f"indicating a previous encoding/decoding error.")

    return errors


def validate_entry(key: str, translation: str) -> List[str]:
    """Run every check on one dictionary entry and return the problems found."""
    errors = []
    if not check_placeholder_parity(key, translation):
        errors.append(f"Placeholder mismatch for key '{key}': translation '{translation}' "
                      f"does not carry the same {{ITEM}}/{{PLAYER}}/{{MONEY}} placeholders.")
    errors.extend(check_gender_directives(translation))
    errors.extend(check_mojibake(key))
    errors.extend(check_mojibake(translation))
    return errors


def validate_entries(entries: Iterable[Tuple[str, str]]) -> List[str]:
    """
    Validates a sequence of (original, translation) pairs.

    Args:
        entries: The dictionary rows to check.

    Returns:
        A list of string error messages, in entry order.
    """
    errors = []
    for key, translation in entries:
        errors.extend(validate_entry(key, translation))
    return errors
