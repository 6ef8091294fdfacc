"""
Collaborator interface implemented by the game integration.

The localization core never inspects game objects. It asks the host for the
current player's name and gender and hands it keys that have no
translation. ``GameHost`` provides neutral defaults so that an integration
only overrides what it can answer.
"""
import logging
import os
import threading
from typing import Optional

logger = logging.getLogger(__name__)


def escape_csv_value(value: str) -> str:
    """Quote a value for a CSV cell when it contains a quote, comma or line break."""
    if value is None:
        return ''
    if any(char in value for char in '",\n\r'):
        return '"' + value.replace('"', '""') + '"'
    return value


class MissingKeyLedger:
    """
    Append-only CSV file of keys that still need a translation.

    Each key is written as ``escaped_key,`` on its own line, leaving the
    translation column empty for translators. Writes are best effort:
    failures are logged and never raised.
    """

    def __init__(self, file_path: str, dry_run: bool = False):
        self.file_path = file_path
        self.dry_run = dry_run
        self._lock = threading.Lock()

    def append(self, key: str) -> bool:
        """
        Append one key to the ledger.

        Args:
            key (str): The untranslated text.

        Returns:
            bool: True if the line was written (or would have been, in dry-run mode).
        """
        line = escape_csv_value(key) + ','
        if self.dry_run:
            logger.info(f"[DRY RUN] Would append missing key to '{self.file_path}': {line}")
            return True

        with self._lock:
            try:
                directory = os.path.dirname(self.file_path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                with open(self.file_path, 'a', encoding='utf-8', newline='') as ledger_file:
                    ledger_file.write(line + '\n')
                return True
            except OSError as e:
                logger.error(f"Could not write missing key to '{self.file_path}': {e}")
                return False


class GameHost:
    """Default host: no player information, missing keys go to the ledger if one is given."""

    def __init__(self, missing_key_ledger: Optional[MissingKeyLedger] = None):
        self.missing_key_ledger = missing_key_ledger

    def get_current_player_name(self) -> Optional[str]:
        return None

    def get_current_player_gender(self) -> Optional[bool]:
        """True for male, False for female, None when unknown."""
        return None

    def report_missing_key(self, key: str) -> None:
        if self.missing_key_ledger is not None:
            self.missing_key_ledger.append(key)
