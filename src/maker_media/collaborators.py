"""Interfaces of the collaborators the tool talks to.

The tool owns no view state. Rendering, notifications and byte transport are
supplied by the host through these protocols.
"""

from __future__ import annotations

from typing import Any, Hashable, Mapping, Protocol

from .domain.capacity import CapacityDecision
from .domain.models import GalleryState, MediaEntry, UploadSource

PlaceholderToken = Hashable
"""Opaque handle for one in-flight upload preview."""


class RenderingSurface(Protocol):
    """View layer that displays entries, upload previews and the caption."""

    def render(self, state: GalleryState, *, read_only: bool) -> Any:
        """Build the block view and return a host specific handle."""

    def on_rendered(self) -> None:
        """Called once the host attached the view."""

    def create_placeholder(self, source: UploadSource) -> PlaceholderToken:
        """Show a progress preview for ``source`` and return its token."""

    def remove_placeholder(self, token: PlaceholderToken) -> None:
        ...

    def append_entry_view(self, entry: MediaEntry) -> None:
        ...

    def set_affordance_visible(self, visible: bool) -> None:
        """Show or hide the add-file control."""

    def update_limit_counter(self, count: int, max_count: int | None) -> None:
        ...

    def set_caption_text(self, text: str) -> None:
        ...

    def get_caption_text(self) -> str:
        ...


class Notifier(Protocol):
    """Fire-and-forget user notifications."""

    def show(self, *, message: str, style: str) -> None:
        ...


class UploadMechanism(Protocol):
    """Sends one file or URL to the backend and returns its raw response."""

    async def upload(self, source: UploadSource) -> Mapping[str, Any]:
        ...


class UploadSink(Protocol):
    """Receives upload resolutions from :class:`UploadSessionTracker`.

    Every method runs synchronously inside a single resolution so capacity
    checks and mutations never interleave.
    """

    def evaluate_capacity(self) -> CapacityDecision:
        """Return capacity computed from the current entry count."""

    def commit_upload(self, entry: MediaEntry) -> None:
        ...

    def upload_failed(self, message: str) -> None:
        ...

    def upload_settled(self) -> None:
        """Re-evaluate capacity after a resolution."""


__all__ = [
    "Notifier",
    "PlaceholderToken",
    "RenderingSurface",
    "UploadMechanism",
    "UploadSink",
]
