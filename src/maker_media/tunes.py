"""Block tunes: style switches plus custom host actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .config import TuneAction
from .domain.models import GalleryStyle
from .domain.style import StyleState

logger = logging.getLogger(__name__)

STYLE_TUNES: tuple[tuple[GalleryStyle, str], ...] = (
    (GalleryStyle.SLIDER, "Slider"),
    (GalleryStyle.GALLERY, "Gallery"),
)


@dataclass(frozen=True, slots=True)
class TuneButton:
    name: str
    title: str
    active: bool = False
    is_style: bool = True


@dataclass(slots=True)
class Tunes:
    """Describe tune buttons and dispatch clicks.

    Style tunes switch :class:`StyleState`; custom actions are forwarded to
    ``on_action`` and leave the style untouched.
    """

    style: StyleState
    actions: Sequence[TuneAction] = ()
    on_action: Callable[[str], None] | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    def render(self) -> list[TuneButton]:
        buttons = [
            TuneButton(name=tune.value, title=title, active=self.style.current is tune)
            for tune, title in STYLE_TUNES
        ]
        buttons.extend(
            TuneButton(name=action.name, title=action.label, is_style=False)
            for action in self.actions
        )
        return buttons

    def click(self, name: str) -> GalleryStyle:
        if any(action.name == name for action in self.actions):
            self.log.debug("maker_media.tunes.action", extra={"tune": name})
            if self.on_action is not None:
                self.on_action(name)
            return self.style.current
        return self.style.toggle(name)


__all__ = ["STYLE_TUNES", "TuneButton", "Tunes"]
