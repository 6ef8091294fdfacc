import logging
from typing import Container, Iterable, List, Optional

from tqdm import tqdm

from game_localizer.sentence_segmenter import parse

logger = logging.getLogger(__name__)


def extract_translatable_units(
        texts: Iterable[str],
        known_keys: Optional[Container[str]] = None,
        show_progress: bool = False
) -> List[str]:
    """
    Collect the units translators still have to fill in.

    Every text goes through the sentence segmenter; the resulting units are
    returned in first-seen order without duplicates.

    Args:
        texts (Iterable[str]): Raw game strings, e.g. dumped from the game's data files.
        known_keys (Optional[Container[str]]): Units already present in the dictionary; these are left out.
        show_progress (bool): Draw a tqdm progress bar while segmenting.

    Returns:
        List[str]: The ordered, de-duplicated units.
    """
    seen = set()
    units: List[str] = []
    skipped_known = 0

    for text in tqdm(texts, desc="Extracting units", unit="text", disable=not show_progress):
        for unit in parse(text):
            if unit in seen:
                continue
            seen.add(unit)
            if known_keys is not None and unit in known_keys:
                skipped_known += 1
                continue
            units.append(unit)

    logger.info(f"Extracted {len(units)} translatable units ({skipped_known} already translated).")
    return units
