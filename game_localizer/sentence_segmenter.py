"""
Splits raw game text into independently translatable sentence units.

The heuristics are tuned to the game's own writing: stat abbreviations such
as ``STR.`` must not end a sentence, dialogue quotes and bracketed actions
become their own units, and engine directives like ``{getName}`` are
rewritten to the placeholders used by the translation files.
"""
import re
from typing import List

from game_localizer.conditional_expander import expand

PARAGRAPH_MARKER = '|PAR|'
ABBREVIATION_MASK = '\ue000'

KNOWN_ABBREVIATIONS = [
    "P.", "DMG.", "STR.", "DEX.", "INT.", "CHA.", "CON.",
    "HP.", "AC.", "DC.", "SPD.", "PER.", "WIS.", "AGI.",
    "LVL."
]
ABBREVIATION_PATTERNS = [
    re.compile(r'\b' + re.escape(abbreviation), re.IGNORECASE)
    for abbreviation in KNOWN_ABBREVIATIONS
]

QUOTE_CHARS = '"“”«»'
LEADING_TRIM_CHARS = ABBREVIATION_MASK + '*«»“”-.…'
TRAILING_TRIM_CHARS = ABBREVIATION_MASK + '*«»“”:-'

# Order matters: at each position the first alternative that matches decides the split.
BOUNDARY_PATTERNS = [
    # sentence end, optionally closed by a quote or parenthesis, before a capital
    r'(?:(?<=[.!?…])|(?<=[.!?…][\'"”)]))\s+(?=[“"\']?[A-Z])',
    # closed quotation followed by a lowercase continuation
    r'(?<=[.!?…][\'"”])\s+(?=[a-z])',
    # closing quote before a capital
    r'(?<=["”])\s+(?=[A-Z])',
    # heading colon before a capital
    r'(?<=:)\s+(?=[“"\']?[A-Z])',
    # comma followed by an opening quote
    r'(?:(?<=,["“])|(?<=,\s["“]))\s*(?=[A-Z])',
    # comma right after a closed quotation
    r'(?<=[.!?…][\'"”]),\s+(?=[A-Z])',
    # comma inside a quotation
    r'(?<=,[\'"“”])\s+(?=[A-Za-z])',
    # ellipsis opening the next sentence
    r'(?:(?<=[.!?…])|(?<=[.!?…][\'"”)]))\s+[“"\']?\.\.\.\s*(?=[A-Z])',
    # quote and dash between two sentences
    r'(?<=[.!?…])\s+["“”]\s*-\s+(?=[A-Z])',
    # paragraph marker
    r'(?<=\|PAR\|)',
    r'(?<=:)\s*(?=\|PAR\|)',
    # tilde separator
    r'(?<=\S)\s*~\s*(?=\S)',
    # colon before a directive
    r'(?<=:)\s+(?=[“"\']?\{)',
    # sentence end before a parenthesised sentence
    r'(?<=[.!?…])\s+(?=\(\s*[“"\']?[A-Z])',
    # closing parenthesis before a capital or another parenthesis
    r'(?:(?<=\))|(?<=\)[”"\']))\s+(?=[A-Z])',
    r'(?:(?<=\))|(?<=\)[”"\']))\s+\(\s*(?=[A-Z])',
    r'(?<=[”"\'])\)\s+\(\s*(?=[A-Z])',
    # sentence end before a signed number, as in bonus lists
    r'(?<=\.)\s+(?=[+\-]\d)',
]
BOUNDARY_PATTERN = re.compile('|'.join(BOUNDARY_PATTERNS))

ANNOTATION_PATTERN = re.compile(r';;.*$', re.MULTILINE)
HTML_TAG_PATTERN = re.compile(r'<[^>]+>')
DIRECTIVE_PATTERN = re.compile(r'\{([^{}]+)\}')
LORD_LADY_PATTERN = re.compile(r'\{lordLady\}', re.IGNORECASE)
BRACKET_ACTION_PATTERN = re.compile(r'\[[^\]]+\]')
WORD_PATTERN = re.compile(r'\b[^\W\d_]+\b')
TITLE_LIST_SEPARATOR = re.compile(r'\s*,\s*|\s+\d+\s+')
LETTER_PATTERN = re.compile(r'[^\W\d_]')


def pre_normalize(text: str) -> str:
    """
    Prepare raw text for segmentation.

    Removes ``;;`` annotations, repairs common typos in conditional syntax,
    drops lines holding only ``*`` and turns blank-line paragraph breaks into
    the paragraph marker.
    """
    text = ANNOTATION_PATTERN.sub('', text)
    text = re.sub(r'#\s*-\s*IF', '#IF', text, flags=re.IGNORECASE)
    text = re.sub(r'-\s*\)\s*#(ELSE|END)', r')#\1', text, flags=re.IGNORECASE)
    text = re.sub(r'\)\s*#(ELSE|END)', r')#\1', text, flags=re.IGNORECASE)
    text = re.sub(r'^[ \t]*\*+[ \t]*$', '', text, flags=re.MULTILINE)
    text = re.sub(r'^(ENTRY\s+\d+.*)$', r'\1' + PARAGRAPH_MARKER, text, flags=re.MULTILINE | re.IGNORECASE)
    text = re.sub(r'\r?\n\s*\r?\n', PARAGRAPH_MARKER, text)
    return text


def mask_abbreviations(text: str) -> str:
    """Wrap known abbreviations in mask characters so their periods do not end a sentence."""
    for pattern in ABBREVIATION_PATTERNS:
        text = pattern.sub(lambda match: f'{ABBREVIATION_MASK}{match.group(0)}{ABBREVIATION_MASK}', text)
    return text


def unmask_abbreviations(text: str) -> str:
    return text.replace(ABBREVIATION_MASK, '')


def strip_outer_sentence_quotes(text: str) -> str:
    """Remove every quote at both edges, including a closing quote followed by ``.``, ``!`` or ``?``."""
    if not text:
        return text

    start = 0
    while start < len(text) and text[start] in QUOTE_CHARS:
        start += 1
    text = text[start:]
    if not text:
        return text

    end = len(text) - 1
    while end >= 0 and (
            text[end] in QUOTE_CHARS or
            (end > 0 and text[end - 1] in QUOTE_CHARS and text[end] in '.!?')):
        end -= 1
    return text[:end + 1].strip()


def trim_edges(text: str) -> str:
    """Strip markers, decorative characters and unbalanced parentheses from both ends."""
    while True:
        if text.startswith(PARAGRAPH_MARKER):
            text = text[len(PARAGRAPH_MARKER):]
        elif text and (text[0] in LEADING_TRIM_CHARS or text[0].isspace() or
                       (text[0] == '(' and text.count('(') > text.count(')'))):
            text = text[1:]
        else:
            break

    while True:
        if text.endswith(PARAGRAPH_MARKER):
            text = text[:-len(PARAGRAPH_MARKER)]
        elif text and (text[-1] in TRAILING_TRIM_CHARS or text[-1].isspace() or
                       (text[-1] == ')' and text.count(')') > text.count('('))):
            text = text[:-1]
        else:
            break

    return text.strip()


def clean_fragment(text: str) -> str:
    """
    Final cleanup of one fragment.

    Returns an empty string when nothing translatable is left: a bare
    placeholder, a number, or text without letters.
    """
    text = strip_outer_sentence_quotes(text)

    # Leading bullets and ordinals: "+1 ", "1) ", "1. "
    text = re.sub(r'^[+\-]?\d+(?:\.\d+)?%?\s*(?:[).]\s*|\s+)', '', text)

    text = unmask_abbreviations(text)

    if re.fullmatch(r'\{(PLAYER|MONEY)\}', text.strip(), flags=re.IGNORECASE):
        return ''

    # Trailing multipliers, before any final punctuation: "x2", ":x1.5", "x3."
    text = re.sub(r'(?:\s*:|\s+|^)x\d+(?:\.\d+)?(?=[.!?…]*\s*$)', '', text, flags=re.IGNORECASE)

    # Trailing parentheses without letters: "(10)", "(02:00)"
    text = re.sub(r'\s*\([^A-Za-z)]*\)\s*$', '', text)
    if re.match(r'^\s*\([^A-Za-z]*$', text):
        return ''

    # Trailing numeric ranges and fractions: "1-3", "3/4", "15"
    text = re.sub(r'\s+\d+(?:[-/]\d+)*\s*$', '', text)

    if re.fullmatch(r'\d+(?:[./]\d+)*(?:\s*[A-Za-z]+)?', text, flags=re.IGNORECASE):
        return ''

    text = re.sub(r'\s{2,}', ' ', text).strip()

    if not LETTER_PATTERN.search(text):
        return ''

    return trim_edges(text)


def split_html_parts(text: str) -> List[str]:
    """Split on every ``<tag>``, keeping the non-empty text between tags as separate parts."""
    parts = []
    for token in HTML_TAG_PATTERN.split(text):
        token = token.strip()
        if token:
            parts.append(token)
    return parts


def _replace_directive(match: re.Match) -> str:
    token = match.group(1)
    lowered = token.lower()

    if lowered == 'getname':
        return '{PLAYER}'

    if lowered.startswith('addxp'):
        _, separator, amount = token.partition('|')
        if separator:
            try:
                return str(int(amount))
            except ValueError:
                pass
        return '0'

    if lowered.startswith(('getmoney', 'getgold')):
        return '{MONEY}'

    return ''


def split_curly_parts(text: str) -> List[str]:
    """
    Rewrite ``{...}`` engine directives.

    ``{lordLady}`` forks the text into a "lord" and a "lady" variant,
    ``{getName}`` becomes ``{PLAYER}``, ``{getMoney}``/``{getGold}`` become
    ``{MONEY}``, ``{addXp|N}`` becomes N, and every other directive is removed.
    """
    if LORD_LADY_PATTERN.search(text):
        variants = [LORD_LADY_PATTERN.sub('lord', text), LORD_LADY_PATTERN.sub('lady', text)]
    else:
        variants = [text]

    results = []
    for variant in variants:
        variant = DIRECTIVE_PATTERN.sub(_replace_directive, variant).strip()
        if variant:
            results.append(variant)
    return results


def split_square_bracket_parts(text: str) -> List[str]:
    """Return the prose with ``[actions]`` removed, followed by each action's inner text."""
    parts = []
    without_actions = BRACKET_ACTION_PATTERN.sub('', text).strip()
    if without_actions:
        parts.append(without_actions)

    for match in BRACKET_ACTION_PATTERN.finditer(text):
        action = match.group(0)[1:-1].strip()
        if action:
            parts.append(action)
    return parts


def split_title_list(line: str) -> List[str]:
    """Split a title-like line (every word capitalised) on commas and embedded numbers."""
    words = WORD_PATTERN.findall(line)
    if not words or not all(word[0].isupper() for word in words):
        return [line]

    parts = []
    for part in TITLE_LIST_SEPARATOR.split(line):
        part = part.strip()
        if part:
            parts.append(part)
    return parts


def split_into_sentences(text: str) -> List[str]:
    """Segment one conditional-free variant into cleaned units."""
    if not text or not text.strip():
        return []

    flat = re.sub(r'\r?\n+', ' ', text).strip()
    flat = mask_abbreviations(flat)

    units = []
    for raw_part in BOUNDARY_PATTERN.split(flat):
        part = raw_part.strip()
        if not part:
            continue

        part = clean_fragment(part)
        for html_part in split_html_parts(part):
            for curly_part in split_curly_parts(html_part):
                for square_part in split_square_bracket_parts(curly_part):
                    cleaned = clean_fragment(square_part)
                    for sub_part in split_title_list(cleaned):
                        final = clean_fragment(sub_part)
                        if final:
                            units.append(final)
    return units


def parse(raw: str) -> List[str]:
    """
    Decompose a raw game string into its ordered translatable units.

    Conditional blocks multiply the text into one variant per branch before
    segmentation, so the units of every branch appear in THEN-before-ELSE
    order. Malformed input never raises; at worst the whole cleaned string
    comes back as a single unit.

    Args:
        raw: The string as received from the game.

    Returns:
        The list of units, possibly empty.
    """
    if not raw:
        return []

    normalized = pre_normalize(raw)

    units = []
    for variant in expand(normalized):
        units.extend(split_into_sentences(variant))
    return units
