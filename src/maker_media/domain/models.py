"""Domain models for the Maker Media gallery tool.

Entries are plain dataclasses. Identity is positional: an entry is addressed
by its index in :class:`~maker_media.domain.collection.MediaCollection`, so any
index held by a caller goes stale after a move or delete.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping


class GalleryStyle(StrEnum):
    """Display variants supported by the block."""

    GALLERY = "gallery"
    SLIDER = "slider"


@dataclass(slots=True)
class MediaEntry:
    """A committed media item returned by the upload backend."""

    url: str
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MediaEntry":
        payload = dict(data)
        url = payload.pop("url")
        return cls(url=str(url), extra=payload)

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, **self.extra}


@dataclass(slots=True)
class MediaFile:
    """File picked or pasted by the user, ready to be sent to the backend."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


UploadSource = MediaFile | str
"""Either a local file or a remote URL to upload."""


@dataclass(slots=True)
class GalleryState:
    """Serializable block data."""

    files: list[MediaEntry] = field(default_factory=list)
    caption: str = ""
    style: GalleryStyle = GalleryStyle.SLIDER

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [entry.to_dict() for entry in self.files],
            "caption": self.caption,
            "style": self.style.value,
        }


__all__ = [
    "GalleryState",
    "GalleryStyle",
    "MediaEntry",
    "MediaFile",
    "UploadSource",
]
