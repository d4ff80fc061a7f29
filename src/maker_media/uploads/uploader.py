"""Default upload mechanism: sends files and URLs to the configured backend."""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import httpx

from ..config import GalleryConfig, TransportSettings
from ..domain.models import MediaEntry, MediaFile, UploadSource
from ..exceptions import (
    MalformedUploadResponseError,
    UploadError,
    UploadTransportError,
    handle_transport_errors,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Uploader:
    """Upload files by multipart POST and remote images by JSON POST.

    When ``config.uploader`` provides ``upload_by_file`` / ``upload_by_url``
    coroutines they replace the HTTP calls. The backend is expected to answer
    ``{"success": 1, "file": {"url": ..., ...}}``.
    """

    config: GalleryConfig
    timeout_seconds: float = 15.0
    transport: httpx.AsyncBaseTransport | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    @classmethod
    def from_settings(
        cls,
        config: GalleryConfig,
        settings: TransportSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "Uploader":
        settings = settings or TransportSettings()
        return cls(
            config=config,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )

    async def upload(self, source: UploadSource) -> Mapping[str, Any]:
        if isinstance(source, MediaFile):
            return await self.upload_by_file(source)
        return await self.upload_by_url(source)

    async def upload_by_file(self, file: MediaFile) -> Mapping[str, Any]:
        custom = self._custom_method("upload_by_file", "uploadByFile")
        if custom is not None:
            return await self._call_custom(custom, file, name="upload_by_file")

        endpoint = self.config.endpoints.by_file
        if not endpoint:
            raise UploadTransportError("endpoints.byFile is not configured")

        files = {self.config.field: (file.filename, file.content, file.content_type)}
        self.log.debug(
            "maker_media.uploader.by_file.start",
            extra={"endpoint": endpoint, "filename": file.filename},
        )
        with handle_transport_errors(endpoint=endpoint):
            async with self._client() as client:
                response = await client.post(
                    endpoint,
                    files=files,
                    data=self.config.additional_request_data,
                    headers=self.config.additional_request_headers,
                )
        return self._decode(response, endpoint=endpoint)

    async def upload_by_url(self, url: str) -> Mapping[str, Any]:
        custom = self._custom_method("upload_by_url", "uploadByUrl")
        if custom is not None:
            return await self._call_custom(custom, url, name="upload_by_url")

        endpoint = self.config.endpoints.by_url
        if not endpoint:
            raise UploadTransportError("endpoints.byUrl is not configured")

        payload = {"url": url, **self.config.additional_request_data}
        self.log.debug(
            "maker_media.uploader.by_url.start",
            extra={"endpoint": endpoint, "source_url": url},
        )
        with handle_transport_errors(endpoint=endpoint):
            async with self._client() as client:
                response = await client.post(
                    endpoint,
                    json=payload,
                    headers=self.config.additional_request_headers,
                )
        return self._decode(response, endpoint=endpoint)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport)

    def _custom_method(self, *names: str) -> Callable[[Any], Any] | None:
        custom = self.config.uploader
        if custom is None:
            return None
        for name in names:
            method = custom.get(name) if isinstance(custom, Mapping) else getattr(custom, name, None)
            if callable(method):
                return method
        return None

    async def _call_custom(
        self, method: Callable[[Any], Any], argument: Any, *, name: str
    ) -> Mapping[str, Any]:
        try:
            result = method(argument)
        except Exception as exc:  # custom uploaders may raise anything
            raise UploadTransportError(f"custom uploader {name} failed: {exc}") from exc
        if not inspect.isawaitable(result):
            raise UploadTransportError(
                f"Custom uploader method {name} should return an awaitable"
            )
        try:
            response = await result
        except UploadError:
            raise
        except Exception as exc:  # custom uploaders may raise anything
            raise UploadTransportError(f"custom uploader {name} failed: {exc}") from exc
        if not isinstance(response, Mapping):
            raise MalformedUploadResponseError(
                f"custom uploader {name} returned {type(response).__name__}"
            )
        return response

    def _decode(self, response: httpx.Response, *, endpoint: str) -> Mapping[str, Any]:
        if not 200 <= response.status_code < 300:
            raise UploadTransportError(
                f"{endpoint}: upload failed with status {response.status_code}"
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedUploadResponseError(f"{endpoint}: response is not JSON") from exc
        if not isinstance(body, Mapping):
            raise MalformedUploadResponseError(f"incorrect response: {_dump(body)}")
        return body


def parse_upload_response(response: Mapping[str, Any]) -> MediaEntry:
    """Extract the committed entry, rejecting responses without ``file.url``."""

    file_data = response.get("file")
    if (
        not response.get("success")
        or not isinstance(file_data, Mapping)
        or not file_data.get("url")
    ):
        raise MalformedUploadResponseError(f"incorrect response: {_dump(response)}")
    return MediaEntry.from_mapping(file_data)


def _dump(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


__all__ = ["Uploader", "parse_upload_response"]
