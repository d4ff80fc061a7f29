"""Error hierarchy for the gallery tool and its upload pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import httpx

__all__ = [
    "MakerMediaError",
    "ConfigurationError",
    "UploadError",
    "UploadTransportError",
    "MalformedUploadResponseError",
    "handle_transport_errors",
]


class MakerMediaError(Exception):
    """Base class for tool specific errors."""


class ConfigurationError(MakerMediaError):
    """Raised when the block configuration cannot be parsed."""


class UploadError(MakerMediaError):
    """Base class for failures of a single upload operation."""


class UploadTransportError(UploadError):
    """Raised when the upload mechanism fails before producing a response."""


class MalformedUploadResponseError(UploadError):
    """Raised when the backend reports success without a usable file locator."""


@contextmanager
def handle_transport_errors(*, endpoint: str | None = None) -> Iterator[None]:
    """Translate ``httpx`` errors into :class:`UploadTransportError`."""

    try:
        yield
    except httpx.HTTPError as exc:
        target = f"{endpoint}: " if endpoint else ""
        raise UploadTransportError(f"{target}{exc.__class__.__name__}: {exc}") from exc
