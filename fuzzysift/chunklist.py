"""A growing list of items stored in fixed-size chunks."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from .cache import ChunkCache
from .constants import CHUNK_SIZE
from .item import Item

ItemBuilder = Callable[[Any], Optional[Item]]
"""Builds an item from raw input data, or returns None to skip it."""


@dataclass(eq=False)
class Chunk:
    """Up to CHUNK_SIZE items. Compared and hashed by identity."""

    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of items held."""
        return len(self.items)

    def is_full(self) -> bool:
        """True when the chunk holds CHUNK_SIZE items."""
        return len(self.items) == CHUNK_SIZE

    def push(self, builder: ItemBuilder, data: Any) -> bool:
        """Build an item from *data* and add it; False when the builder skipped it."""
        item = builder(data)
        if item is None:
            return False
        self.items.append(item)
        return True


def _duplicate(chunk: Chunk, keep: Optional[int] = None) -> Chunk:
    items = chunk.items if keep is None else chunk.items[len(chunk.items) - keep :]
    return Chunk(items=list(items))


def count_items(chunks: Sequence[Chunk]) -> int:
    """Total number of items in *chunks*."""
    return sum(chunk.count for chunk in chunks)


class ChunkList:
    """Thread-safe list of chunks fed one input line at a time."""

    def __init__(self, cache: ChunkCache, builder: ItemBuilder) -> None:
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()
        self._builder = builder
        self._cache = cache

    def push(self, data: Any) -> bool:
        """Add an item built from *data*; False when the builder skipped it."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            return self._chunks[-1].push(self._builder, data)

    def clear(self) -> None:
        """Drop every item."""
        with self._lock:
            self._chunks = []

    def snapshot(self, tail: int = 0) -> tuple[list[Chunk], int, bool]:
        """An immutable view of the list: (chunks, item count, changed).

        With a positive *tail* only the last *tail* items are kept, and the
        others are discarded from the list for good; *changed* tells whether
        anything was discarded by this call.
        """
        with self._lock:
            changed = False
            if tail > 0 and count_items(self._chunks) > tail:
                changed = True
                num_chunks = 0
                left = tail
                for chunk in reversed(self._chunks):
                    if left <= 0:
                        break
                    num_chunks += 1
                    left -= chunk.count

                min_index = len(self._chunks) - num_chunks
                self._cache.retire(*self._chunks[:min_index])
                kept = self._chunks[min_index:]

                left = tail
                for pos in range(len(kept) - 1, -1, -1):
                    chunk = kept[pos]
                    if chunk.count > left:
                        kept[pos] = _duplicate(chunk, keep=left)
                        self._cache.retire(chunk)
                        break
                    left -= chunk.count
                self._chunks = kept

            ret = list(self._chunks)
            # The first chunk may be cut further and the last one may grow
            if ret:
                if tail > 0 and len(ret) > 1:
                    ret[0] = _duplicate(ret[0])
                ret[-1] = _duplicate(ret[-1])
            return ret, count_items(ret), changed