"""
Expansion of the game's ``#IF(cond)#THEN(a)#ELSE(b)#END`` mini-language.

The condition is never evaluated. Every branch is emitted so that each
phrasing the game can show ends up as its own translatable text.
"""
import re
from typing import List, Optional, Tuple

IF_PATTERN = re.compile(r'#IF\s*\(', re.IGNORECASE)
KEYWORD_PATTERN = re.compile(r'#(IF|ELSE|END)', re.IGNORECASE)
THEN_PATTERN = re.compile(r'\s*#THEN', re.IGNORECASE)
ELSE_PATTERN = re.compile(r'\s*#ELSE', re.IGNORECASE)
END_PATTERN = re.compile(r'\s*#END', re.IGNORECASE)

# Opening quote -> closing quote
QUOTE_PAIRS = {'"': '"', '“': '”', '«': '»'}


def strip_outer_quotes(text: str) -> str:
    """Remove one pair of matching quotes when that pair wraps the whole text."""
    text = text.strip()
    if len(text) < 2:
        return text
    opening = text[0]
    closing = QUOTE_PAIRS.get(opening)
    if closing is None or text[-1] != closing:
        return text
    inner = text[1:-1]
    if opening in inner or closing in inner:
        return text
    return inner.strip()


def _find_matching_paren(text: str, open_index: int) -> int:
    """Return the index of the ``)`` closing the ``(`` at open_index, or -1."""
    depth = 0
    for i in range(open_index, len(text)):
        char = text[i]
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return i
    return -1


def _find_raw_body_end(text: str, start: int, stop_at_else: bool) -> Optional[Tuple[int, str]]:
    """
    Scan an unparenthesized branch body for the keyword that terminates it.

    Nested ``#IF ... #END`` blocks are skipped. Returns the index of the
    terminating keyword and its upper-cased name, or None.
    """
    depth = 0
    for match in KEYWORD_PATTERN.finditer(text, start):
        keyword = match.group(1).upper()
        if keyword == 'IF':
            depth += 1
        elif keyword == 'END':
            if depth == 0:
                return match.start(), 'END'
            depth -= 1
        elif keyword == 'ELSE' and depth == 0 and stop_at_else:
            return match.start(), 'ELSE'
    return None


def _parse_branch(text: str, start: int, stop_at_else: bool) -> Optional[Tuple[str, int]]:
    """
    Parse a branch body beginning at ``start`` (just after #THEN / #ELSE).

    Returns the raw body and the index right after it, or None when no
    terminator can be found.
    """
    position = start
    while position < len(text) and text[position].isspace():
        position += 1

    if position < len(text) and text[position] == '(':
        close = _find_matching_paren(text, position)
        if close != -1:
            follower = END_PATTERN.match(text, close + 1)
            if follower is None and stop_at_else:
                follower = ELSE_PATTERN.match(text, close + 1)
            if follower is not None:
                return text[position + 1:close], close + 1

    # Raw form: the body runs up to the next top-level #ELSE / #END
    terminator = _find_raw_body_end(text, position, stop_at_else)
    if terminator is None:
        return None
    end_index, _ = terminator
    return text[position:end_index], end_index


def _match_block(text: str, cond_open: int) -> Optional[Tuple[int, str, Optional[str]]]:
    """
    Try to parse a full conditional block whose condition opens at ``cond_open``.

    Returns (block_end, then_body, else_body) or None if the block is malformed.
    """
    cond_close = _find_matching_paren(text, cond_open)
    if cond_close == -1:
        return None

    then_match = THEN_PATTERN.match(text, cond_close + 1)
    if then_match is None:
        return None

    then_branch = _parse_branch(text, then_match.end(), stop_at_else=True)
    if then_branch is None:
        return None
    then_body, position = then_branch

    else_body = None
    else_match = ELSE_PATTERN.match(text, position)
    if else_match is not None:
        else_branch = _parse_branch(text, else_match.end(), stop_at_else=False)
        if else_branch is None:
            return None
        else_body, position = else_branch

    end_match = END_PATTERN.match(text, position)
    if end_match is None:
        return None
    return end_match.end(), then_body, else_body


def expand(text: str) -> List[str]:
    """
    Produce every literal variant of ``text`` reachable through its conditional blocks.

    The leftmost well-formed block is replaced by its THEN body and, when a
    non-empty ELSE body exists, by its ELSE body; each result is expanded
    again until no block remains. Nested and sequential blocks therefore
    yield the cross product of branch choices, THEN before ELSE.

    Malformed blocks (unbalanced parentheses, missing #THEN or #END) are left
    in place as literal text.

    Args:
        text: The raw game string.

    Returns:
        The list of expanded variants, each stripped of surrounding whitespace.
    """
    for if_match in IF_PATTERN.finditer(text):
        block = _match_block(text, if_match.end() - 1)
        if block is None:
            continue

        block_end, then_body, else_body = block
        prefix = text[:if_match.start()]
        suffix = text[block_end:]

        variants = expand(prefix + strip_outer_quotes(then_body) + suffix)
        if else_body is not None:
            else_text = strip_outer_quotes(else_body)
            if else_text:
                variants.extend(expand(prefix + else_text + suffix))
        return variants

    return [text.strip()]
