"""
Caching utility module for finished podcast artifacts.
"""

import threading
import uuid
from typing import Dict, Optional

from vidinsight.models.schemas import PodcastResult
from vidinsight.utils.logger import logging


class PodcastResultCache:
    """
    In-memory store of generated podcasts keyed by an opaque identifier.

    All operations hold a single lock, so a reader never observes a partially
    written entry. Entries live until ``clear`` is called; there is no expiry.
    """

    def __init__(self):
        self._entries: Dict[str, PodcastResult] = {}
        self._lock = threading.Lock()

    def put(self, result: PodcastResult) -> str:
        """
        Store a result under a freshly generated identifier.

        Args:
            result: The podcast to store

        Returns:
            The identifier (128-bit random, hex encoded)
        """
        with self._lock:
            result_id = uuid.uuid4().hex
            while result_id in self._entries:
                result_id = uuid.uuid4().hex
            self._entries[result_id] = result

        logging.info(f"Cached podcast {result_id} ({result.audio_size_bytes} bytes of audio)")
        return result_id

    def get(self, result_id: str) -> Optional[PodcastResult]:
        """
        Get a stored result.

        Args:
            result_id: Identifier returned by ``put``

        Returns:
            The stored PodcastResult or None if not found
        """
        with self._lock:
            return self._entries.get(result_id)

    def clear(self) -> int:
        """Remove every entry and return how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries = {}

        logging.info(f"Cleared {removed} cached podcasts")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, result_id: object) -> bool:
        with self._lock:
            return result_id in self._entries
