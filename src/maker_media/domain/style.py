"""Gallery/slider display mode."""

from __future__ import annotations

from dataclasses import dataclass

from .models import GalleryStyle


def resolve_style(value: object) -> GalleryStyle:
    """Map raw block data onto a style; anything but ``gallery`` is a slider."""

    if value == GalleryStyle.GALLERY.value:
        return GalleryStyle.GALLERY
    return GalleryStyle.SLIDER


@dataclass(slots=True)
class StyleState:
    current: GalleryStyle = GalleryStyle.SLIDER

    def toggle(self, value: object) -> GalleryStyle:
        self.current = resolve_style(value)
        return self.current

    @property
    def is_gallery(self) -> bool:
        return self.current is GalleryStyle.GALLERY


__all__ = ["StyleState", "resolve_style"]
