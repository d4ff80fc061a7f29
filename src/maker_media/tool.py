"""Maker Media block tool.

The facade composes the entry collection, style state, tunes and the upload
tracker into the load/save contract of a block editor:

* ``hydrate`` / ``data`` setter - load previously saved block data;
* ``render`` / ``rendered`` - hand the state to the rendering surface;
* ``validate`` - reject blocks without files;
* ``save`` / ``serialize`` - read the current state back out.

User actions (add, move, delete, paste, tune clicks) arrive as plain method
calls. Upload resolutions come back through the :class:`UploadSink` methods.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Sequence

from .collaborators import Notifier, RenderingSurface, UploadMechanism
from .config import GalleryConfig, TransportSettings, load_config
from .domain.capacity import CapacityDecision
from .domain.collection import MediaCollection
from .domain.models import GalleryState, GalleryStyle, MediaEntry, MediaFile, UploadSource
from .domain.style import StyleState
from .tunes import TuneButton, Tunes
from .uploads.tracker import UploadOutcome, UploadSessionTracker
from .uploads.uploader import Uploader

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Couldn't upload image. Please try another."

TOOLBOX_ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" fill="currentColor" height="20" '
    'viewBox="0 -960 960 960" width="20"><path d="M360-384h384L618-552l-90 '
    "120-66-88-102 136Zm-48 144q-29.7 0-50.85-21.15Q240-282.3 240-312v-480q0-29.7 "
    "21.15-50.85Q282.3-864 312-864h480q29.7 0 50.85 21.15Q864-821.7 864-792v480q0 "
    "29.7-21.15 50.85Q821.7-240 792-240H312Zm0-72h480v-480H312v480ZM168-96q-29.7 "
    '0-50.85-21.15Q96-138.3 96-168v-552h72v552h552v72H168Zm144-696v480-480Z"/></svg>'
)

IMAGE_URL_PATTERN = re.compile(r"(?i)https?://\S+\.(gif|jpe?g|tiff|png|svg|webp)(\?[a-z0-9=]*)?$")


@dataclass(frozen=True, slots=True)
class PasteEvent:
    """Content pasted into the block.

    ``tag`` carries the attributes of a pasted ``<img>`` (``{"src": ...}``),
    ``pattern`` a pasted image URL, ``file`` a :class:`MediaFile`.
    """

    kind: Literal["tag", "pattern", "file"]
    data: Any


class MakerMediaTool:
    """Gallery block with capacity-bounded concurrent uploads."""

    is_read_only_supported = True
    toolbox = {"icon": TOOLBOX_ICON, "title": "Media"}

    def __init__(
        self,
        *,
        surface: RenderingSurface,
        notifier: Notifier,
        data: Mapping[str, Any] | GalleryState | None = None,
        config: Mapping[str, Any] | GalleryConfig | None = None,
        read_only: bool = False,
        uploader: UploadMechanism | None = None,
        settings: TransportSettings | None = None,
        on_action: Callable[[str], None] | None = None,
    ) -> None:
        self.config = load_config(config)
        self.surface = surface
        self.notifier = notifier
        self.read_only = read_only

        self.collection = MediaCollection(max_count=self.config.max_element_count)
        self.style = StyleState()
        self.caption = ""

        if uploader is None:
            uploader = Uploader.from_settings(self.config, settings)
        self.uploader = uploader
        self.tracker = UploadSessionTracker(
            uploader=self.uploader,
            surface=surface,
            sink=self,
        )
        self.tunes = Tunes(style=self.style, actions=self.config.actions, on_action=on_action)

        self.hydrate(data or {})

    @classmethod
    def paste_config(cls, config: GalleryConfig | None = None) -> dict[str, Any]:
        types = (config or GalleryConfig()).types
        return {
            "tags": ["img"],
            "patterns": {"image": IMAGE_URL_PATTERN.pattern},
            "files": {"mimeTypes": [item.strip() for item in types.split(",")]},
        }

    # Host contract

    @property
    def data(self) -> GalleryState:
        return GalleryState(
            files=self.collection.snapshot(),
            caption=self.caption,
            style=self.style.current,
        )

    @data.setter
    def data(self, value: Mapping[str, Any] | GalleryState) -> None:
        self.hydrate(value)

    def hydrate(self, data: Mapping[str, Any] | GalleryState) -> None:
        """Replace the block state; initial files go through the upload append path."""

        if isinstance(data, GalleryState):
            data = data.to_dict()

        self.collection.clear()
        for raw in data.get("files") or []:
            entry = _coerce_entry(raw)
            if entry is None:
                logger.debug("maker_media.hydrate.skip_file", extra={"file": repr(raw)})
                continue
            self.append_image(entry)

        self.style_toggled(data.get("style") or "")
        self.caption = data.get("caption") or ""
        self.surface.set_caption_text(self.caption)
        self.check_capacity()

    def render(self) -> Any:
        return self.surface.render(self.data, read_only=self.read_only)

    def rendered(self) -> None:
        self.check_capacity()
        self.surface.on_rendered()

    @staticmethod
    def validate(saved: Mapping[str, Any] | GalleryState) -> bool:
        """A block is valid only when it has at least one file."""

        files = saved.files if isinstance(saved, GalleryState) else saved.get("files")
        return bool(files)

    def serialize(self) -> GalleryState:
        # The caption lives in the editable view, read it right before saving.
        self.caption = self.surface.get_caption_text()
        return self.data

    def save(self) -> dict[str, Any]:
        return self.serialize().to_dict()

    def render_settings(self) -> list[TuneButton]:
        return self.tunes.render()

    def destroy(self) -> None:
        self.tracker.close()

    # User actions

    async def select_files(self, sources: Sequence[UploadSource]) -> list[UploadOutcome]:
        """Upload the picked files, at most as many as the gallery still fits."""

        if self._ignored_in_read_only("select_files"):
            return []
        return await self.tracker.add_files(sources)

    async def on_paste(self, event: PasteEvent) -> list[UploadOutcome]:
        if self._ignored_in_read_only("paste"):
            return []

        source: UploadSource
        if event.kind == "tag":
            source = str(event.data.get("src", "")) if isinstance(event.data, Mapping) else ""
        elif event.kind == "pattern":
            source = str(event.data)
        elif event.kind == "file":
            source = event.data
            if not isinstance(source, MediaFile) or not self.config.accepts(source.content_type):
                logger.info(
                    "maker_media.paste.unsupported_file",
                    extra={"content_type": getattr(source, "content_type", None)},
                )
                return []
        else:
            logger.debug("maker_media.paste.unknown_kind", extra={"kind": event.kind})
            return []

        if not source:
            return []
        return await self.tracker.add_files([source])

    def move_file(self, from_index: int, to_index: int) -> None:
        if self._ignored_in_read_only("move"):
            return
        self.collection.move(from_index, to_index)
        self.check_capacity()

    def delete_file(self, index: int) -> None:
        if self._ignored_in_read_only("delete"):
            return
        self.collection.delete(index)
        self.check_capacity()

    def style_toggled(self, name: object) -> GalleryStyle:
        return self.style.toggle(name)

    def tune_clicked(self, name: str) -> GalleryStyle:
        return self.tunes.click(name)

    # Collection plumbing

    def append_image(self, entry: MediaEntry) -> None:
        self._commit(entry)
        self.check_capacity()

    def check_capacity(self) -> CapacityDecision:
        """Push the limit counter and add-button visibility to the surface."""

        decision = self.collection.evaluate_capacity()
        self.surface.update_limit_counter(decision.count, decision.max_count)
        self.surface.set_affordance_visible(decision.can_accept_more and not self.read_only)
        return decision

    def _commit(self, entry: MediaEntry) -> None:
        if self.collection.is_full:
            return
        self.collection.append(entry)
        self.surface.append_entry_view(entry)

    def _ignored_in_read_only(self, action: str) -> bool:
        if self.read_only:
            logger.debug("maker_media.read_only.ignored", extra={"action": action})
        return self.read_only

    # UploadSink

    def evaluate_capacity(self) -> CapacityDecision:
        return self.collection.evaluate_capacity()

    def commit_upload(self, entry: MediaEntry) -> None:
        self._commit(entry)

    def upload_failed(self, message: str) -> None:
        self.notifier.show(message=UPLOAD_FAILED_MESSAGE, style="error")

    def upload_settled(self) -> None:
        self.check_capacity()


def _coerce_entry(raw: Any) -> MediaEntry | None:
    if isinstance(raw, MediaEntry):
        return raw
    if isinstance(raw, Mapping) and raw.get("url"):
        return MediaEntry.from_mapping(raw)
    return None


__all__ = ["IMAGE_URL_PATTERN", "MakerMediaTool", "PasteEvent", "UPLOAD_FAILED_MESSAGE"]
