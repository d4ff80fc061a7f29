"""Ordered, capacity-bounded collection of committed media entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from . import capacity
from .models import MediaEntry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MediaCollection:
    """Authoritative entry sequence owned by the tool.

    Mutations are synchronous and never interleave with each other. Callers
    must re-check capacity after ``append`` since it reports nothing back.
    """

    max_count: int | None = None
    _entries: list[MediaEntry] = field(default_factory=list, init=False, repr=False)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MediaEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> MediaEntry:
        return self._entries[index]

    @property
    def is_full(self) -> bool:
        return not capacity.can_accept_more(len(self._entries), self.max_count)

    def evaluate_capacity(self) -> capacity.CapacityDecision:
        return capacity.evaluate(len(self._entries), self.max_count)

    def snapshot(self) -> list[MediaEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def append(self, entry: MediaEntry) -> None:
        if self.is_full:
            logger.debug(
                "maker_media.collection.append.full",
                extra={"count": len(self._entries), "max_count": self.max_count},
            )
            return
        self._entries.append(entry)

    def move(self, from_index: int, to_index: int) -> None:
        size = len(self._entries)
        if not 0 <= from_index < size:
            logger.debug(
                "maker_media.collection.move.stale",
                extra={"from_index": from_index, "count": size},
            )
            return
        if to_index >= size:
            to_index = size - 1
        to_index = max(to_index, 0)
        entry = self._entries.pop(from_index)
        self._entries.insert(to_index, entry)

    def delete(self, index: int) -> None:
        if not 0 <= index < len(self._entries):
            logger.debug(
                "maker_media.collection.delete.stale",
                extra={"index": index, "count": len(self._entries)},
            )
            return
        del self._entries[index]


__all__ = ["MediaCollection"]
