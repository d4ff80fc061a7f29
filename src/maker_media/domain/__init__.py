"""Domain state of the gallery block: entries, capacity and display style."""

from .capacity import (
    CapacityDecision,
    add_budget,
    can_accept_more,
    evaluate,
    remaining_slots,
)
from .collection import MediaCollection
from .models import GalleryState, GalleryStyle, MediaEntry, MediaFile, UploadSource
from .style import StyleState, resolve_style

__all__ = [
    "CapacityDecision",
    "GalleryState",
    "GalleryStyle",
    "MediaCollection",
    "MediaEntry",
    "MediaFile",
    "StyleState",
    "UploadSource",
    "add_budget",
    "can_accept_more",
    "evaluate",
    "remaining_slots",
    "resolve_style",
]
