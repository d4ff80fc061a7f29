"""Concurrent upload orchestration for one gallery block.

Every dispatched upload is paired with a placeholder token from the rendering
surface. Uploads run as asyncio tasks and resolve independently: a success is
committed only if the gallery still has room at resolution time, a failure
removes the placeholder and is reported through the sink. Nothing raised by
an upload escapes the tracker.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Sequence

from ..collaborators import PlaceholderToken, RenderingSurface, UploadMechanism, UploadSink
from ..domain import capacity
from ..domain.models import MediaEntry, MediaFile, UploadSource
from ..exceptions import MalformedUploadResponseError
from .uploader import parse_upload_response

logger = logging.getLogger(__name__)


class UploadOutcome(StrEnum):
    """How a single upload operation was resolved."""

    COMMITTED = "committed"
    DROPPED = "dropped"
    FAILED = "failed"
    IGNORED = "ignored"


@dataclass(slots=True)
class UploadSessionTracker:
    """Dispatch uploads within the capacity budget and route their results."""

    uploader: UploadMechanism
    surface: RenderingSurface
    sink: UploadSink
    log: logging.Logger = field(default_factory=lambda: logger)
    _pending: set[asyncio.Task[UploadOutcome]] = field(
        default_factory=set, init=False, repr=False
    )
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    def start_batch(self, sources: Sequence[UploadSource]) -> list[asyncio.Task[UploadOutcome]]:
        """Create placeholders and start uploads for as many sources as fit.

        Must be called from a running event loop. The budget is computed from
        the entry count at call time; sources beyond it are never started.
        """

        if self._closed:
            self.log.debug("maker_media.upload.batch.closed", extra={"requested": len(sources)})
            return []

        decision = self.sink.evaluate_capacity()
        budget = capacity.add_budget(len(sources), decision.count, decision.max_count)
        if budget < len(sources):
            self.log.info(
                "maker_media.upload.batch.truncated",
                extra={
                    "requested": len(sources),
                    "budget": budget,
                    "count": decision.count,
                    "max_count": decision.max_count,
                },
            )

        tasks: list[asyncio.Task[UploadOutcome]] = []
        for source in sources[:budget]:
            token = self.surface.create_placeholder(source)
            task = asyncio.create_task(self._run(source, token))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def add_files(self, sources: Sequence[UploadSource]) -> list[UploadOutcome]:
        """Run one batch to completion and return outcomes in request order."""

        tasks = self.start_batch(sources)
        if not tasks:
            return []
        return list(await asyncio.gather(*tasks))

    def close(self) -> None:
        """Release in-flight handles; later resolutions are ignored.

        The underlying transports are not cancelled.
        """

        self._closed = True
        self._pending.clear()

    async def _run(self, source: UploadSource, token: PlaceholderToken) -> UploadOutcome:
        try:
            return await self._settle(source, token)
        except Exception:  # collaborator errors never leave the tracker
            self.log.exception(
                "maker_media.upload.resolution_error", extra={"source": _describe(source)}
            )
            return UploadOutcome.FAILED

    async def _settle(self, source: UploadSource, token: PlaceholderToken) -> UploadOutcome:
        try:
            response = await self.uploader.upload(source)
            entry = parse_upload_response(response)
        except Exception as exc:  # upload failures never leave the tracker
            return self._resolve_failure(source, token, exc)
        return self._resolve_success(source, token, entry)

    def _resolve_success(
        self, source: UploadSource, token: PlaceholderToken, entry: MediaEntry
    ) -> UploadOutcome:
        if self._closed:
            self.log.debug("maker_media.upload.ignored", extra={"source": _describe(source)})
            return UploadOutcome.IGNORED

        # Siblings may have filled the gallery since the batch started.
        decision = self.sink.evaluate_capacity()
        self.surface.remove_placeholder(token)
        if decision.can_accept_more:
            self.sink.commit_upload(entry)
            outcome = UploadOutcome.COMMITTED
        else:
            self.log.info(
                "maker_media.upload.dropped",
                extra={
                    "source": _describe(source),
                    "url": entry.url,
                    "max_count": decision.max_count,
                },
            )
            outcome = UploadOutcome.DROPPED
        self.sink.upload_settled()
        return outcome

    def _resolve_failure(
        self, source: UploadSource, token: PlaceholderToken, exc: Exception
    ) -> UploadOutcome:
        if self._closed:
            self.log.debug("maker_media.upload.ignored", extra={"source": _describe(source)})
            return UploadOutcome.IGNORED

        kind = "malformed_response" if isinstance(exc, MalformedUploadResponseError) else "transport"
        self.log.warning(
            "maker_media.upload.failed",
            extra={"source": _describe(source), "kind": kind, "error": str(exc)},
        )
        self.surface.remove_placeholder(token)
        self.sink.upload_failed(str(exc))
        self.sink.upload_settled()
        return UploadOutcome.FAILED


def _describe(source: UploadSource) -> str:
    if isinstance(source, MediaFile):
        return source.filename
    return source


__all__ = ["UploadOutcome", "UploadSessionTracker"]
