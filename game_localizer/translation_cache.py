import threading
from typing import Dict, Optional


class TranslationCache:
    """
    Thread-safe memo of whole input strings to their final output.

    Entries are write-once: the first writer for a key wins and later writes
    for the same key are ignored, so a published translation never changes.
    """

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(key)

    def publish(self, key: str, value: str) -> str:
        """
        Store value under key unless the key is already present.

        Returns:
            str: The value stored for key after the call, which is the earlier
            value when another writer got there first.
        """
        with self._lock:
            return self._entries.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
