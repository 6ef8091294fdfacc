"""Positional templates for reinserting translated units into the original text."""
from typing import Optional, Sequence


def build_template(text: str, units: Sequence[str]) -> str:
    """
    Replace each unit in the text with a positional marker ``{N}``.

    Units are substituted longest first so that a short unit cannot claim
    part of a longer unit that contains it. N is the unit's position in the
    original segmentation order, not in the sorted order. A unit whose text
    can no longer be found (for example because an overlapping unit already
    consumed it) is skipped and its translation will not be reinserted.

    Args:
        text (str): The original input text.
        units (Sequence[str]): The units produced by segmentation, in order.

    Returns:
        str: The template string.
    """
    if not isinstance(text, str):
        raise ValueError("Input text must be a string.")

    template = text
    # sorted() is stable, so equal-length units keep their original order
    ordered = sorted(enumerate(units), key=lambda indexed: len(indexed[1]), reverse=True)
    for index, unit in ordered:
        if not unit:
            continue
        position = template.find(unit)
        if position == -1:
            continue
        template = template[:position] + f"{{{index}}}" + template[position + len(unit):]
    return template


def apply_template(template: str, translated_units: Sequence[Optional[str]]) -> str:
    """
    Fill a template built by build_template with translated units.

    Args:
        template (str): The template with ``{N}`` markers.
        translated_units (Sequence[Optional[str]]): One entry per original unit; None inserts nothing.

    Returns:
        str: The reassembled text.
    """
    result = template
    for index, translated in enumerate(translated_units):
        result = result.replace(f"{{{index}}}", translated or '')
    return result
