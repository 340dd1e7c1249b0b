"""Per-chunk cache of search results keyed by query string."""

from __future__ import annotations

import threading
from typing import Any, Optional

from .chunklist import CHUNK_SIZE, Chunk

QUERY_CACHE_MAX = CHUNK_SIZE // 5
"""Results of queries matching more than this many items are not cached."""


class ChunkCache:
    """Thread-safe mapping from (chunk, query) to the results found for it.

    Only full chunks are cached, since other chunks may still grow.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[Chunk, dict[str, list[Any]]] = {}

    def add(self, chunk: Chunk, key: str, results: list[Any]) -> None:
        """Remember ``results`` for ``key`` on ``chunk`` if they are worth keeping."""
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            self._cache.setdefault(chunk, {})[key] = results

    def lookup(self, chunk: Chunk, key: str) -> Optional[list[Any]]:
        """Results cached for exactly ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            return queries.get(key)

    def search(self, chunk: Chunk, key: str) -> Optional[list[Any]]:
        """Results cached for the longest prefix or suffix of ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            for cut in range(1, len(key)):
                for sub in (key[: len(key) - cut], key[cut:]):
                    if sub in queries:
                        return queries[sub]
        return None