"""Per-chunk cache of query results."""

from __future__ import annotations

import threading
from typing import Any, Protocol, Sequence

from .constants import QUERY_CACHE_MAX


class _Cacheable(Protocol):
    def is_full(self) -> bool: ...


class ChunkCache:
    """Maps a chunk and a query string to the results found in that chunk.

    Only full chunks are cached, since a chunk that is still filling up can
    gain items that would invalidate its results.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[_Cacheable, dict[str, Sequence[Any]]] = {}

    def clear(self) -> None:
        """Forget every cached result."""
        with self._lock:
            self._cache = {}

    def retire(self, *args: _Cacheable) -> None:
        """Forget the results cached for the given chunks."""
        with self._lock:
            for chunk in args:
                self._cache.pop(chunk, None)

    def add(self, chunk: _Cacheable, key: str, results: Sequence[Any]) -> None:
        """Cache *results* of query *key* on *chunk*.

        Nothing is stored for an empty key, a chunk that is not full, or a
        result list too long to be worth keeping.
        """
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            self._cache.setdefault(chunk, {})[key] = results

    def lookup(self, chunk: _Cacheable, key: str) -> Sequence[Any] | None:
        """Results cached for exactly *key* on *chunk*, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            return queries.get(key)

    def search(self, chunk: _Cacheable, key: str) -> Sequence[Any] | None:
        """Results cached for the longest prefix or suffix of *key*, or None.

        Shorter queries match a superset of what *key* matches, so their
        results narrow the items that have to be examined.
        """
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            for idx in range(1, len(key)):
                for substr in (key[: len(key) - idx], key[idx:]):
                    cached = queries.get(substr)
                    if cached is not None:
                        return cached
        return None