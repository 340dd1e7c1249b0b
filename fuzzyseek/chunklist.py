"""Append-only list of input items, grouped in fixed-size chunks."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .item import Item

CHUNK_SIZE = 100
"""Number of items a chunk holds once it is full."""

ItemBuilder = Callable[[Any], Optional[Item]]
"""Turns raw input into an :class:`Item`, or returns None to skip it."""


@dataclass(eq=False)
class Chunk:
    """A group of at most :data:`CHUNK_SIZE` items.

    Chunks compare and hash by identity, so they can serve as cache keys.
    """

    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self) -> bool:
        """True once the chunk holds :data:`CHUNK_SIZE` items."""
        return len(self.items) == CHUNK_SIZE

    def _push(self, builder: ItemBuilder, data: Any) -> bool:
        item = builder(data)
        if item is None:
            return False
        self.items.append(item)
        return True


def count_items(chunks: list[Chunk]) -> int:
    """Total number of items in a sequence of chunks."""
    if not chunks:
        return 0
    return CHUNK_SIZE * (len(chunks) - 1) + chunks[-1].count


class ChunkList:
    """Thread-safe list of chunks that items are pushed onto."""

    def __init__(self, builder: ItemBuilder) -> None:
        self._builder = builder
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()

    @property
    def builder(self) -> ItemBuilder:
        return self._builder

    def push(self, data: Any) -> bool:
        """Build an item from ``data`` and append it; False if it was skipped."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            return self._chunks[-1]._push(self._builder, data)

    def clear(self) -> None:
        """Drop every chunk."""
        with self._lock:
            self._chunks = []

    def snapshot(self) -> tuple[list[Chunk], int]:
        """An immutable view of the chunks and the number of items in them.

        Full chunks never change, so they are shared; the last chunk is
        copied so that later pushes do not show up in the snapshot.
        """
        with self._lock:
            chunks = list(self._chunks)
            if chunks:
                chunks[-1] = Chunk(list(chunks[-1].items))
        return chunks, count_items(chunks)