"""Capacity helpers gating new uploads and the add-file affordance.

All helpers are pure. ``max_count=None`` means the gallery is unbounded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CapacityDecision:
    """Snapshot of capacity derived from the current entry count."""

    count: int
    max_count: int | None
    remaining: float
    can_accept_more: bool

    @property
    def hide_affordance(self) -> bool:
        return not self.can_accept_more


def remaining_slots(count: int, max_count: int | None) -> float:
    """Return how many entries may still be added (``math.inf`` if unbounded)."""

    if max_count is None:
        return math.inf
    return max(0, max_count - count)


def can_accept_more(count: int, max_count: int | None) -> bool:
    return remaining_slots(count, max_count) > 0


def add_budget(requested: int, count: int, max_count: int | None) -> int:
    """Clamp ``requested`` uploads to the remaining capacity."""

    if requested <= 0:
        return 0
    remaining = remaining_slots(count, max_count)
    if remaining == math.inf:
        return requested
    return int(min(requested, remaining))


def evaluate(count: int, max_count: int | None) -> CapacityDecision:
    remaining = remaining_slots(count, max_count)
    return CapacityDecision(
        count=count,
        max_count=max_count,
        remaining=remaining,
        can_accept_more=remaining > 0,
    )


__all__ = [
    "CapacityDecision",
    "add_budget",
    "can_accept_more",
    "evaluate",
    "remaining_slots",
]
