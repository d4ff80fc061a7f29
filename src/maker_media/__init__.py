"""Maker Media: gallery block core with capacity-bounded concurrent uploads.

The package keeps the block state (ordered entries, caption, display style)
consistent while uploads run in parallel. Rendering, notifications and byte
transport are collaborators described in :mod:`maker_media.collaborators`.
"""

from .config import GalleryConfig, TransportSettings, load_config
from .domain import GalleryState, GalleryStyle, MediaEntry, MediaFile
from .exceptions import (
    ConfigurationError,
    MakerMediaError,
    MalformedUploadResponseError,
    UploadError,
    UploadTransportError,
)
from .tool import MakerMediaTool, PasteEvent
from .uploads import UploadOutcome, UploadSessionTracker, Uploader

__all__ = [
    "ConfigurationError",
    "GalleryConfig",
    "GalleryState",
    "GalleryStyle",
    "MakerMediaError",
    "MakerMediaTool",
    "MalformedUploadResponseError",
    "MediaEntry",
    "MediaFile",
    "PasteEvent",
    "TransportSettings",
    "UploadError",
    "UploadOutcome",
    "UploadSessionTracker",
    "UploadTransportError",
    "Uploader",
    "load_config",
]
