"""Development upload backend.

Stores uploaded files under ``MAKER_MEDIA_DEV_MEDIA_ROOT`` and answers in the
format the tool expects, so a block can be exercised locally::

    $ maker-media-devserver

    config = {"endpoints": {"byFile": "http://localhost:8008/uploadFile",
                            "byUrl": "http://localhost:8008/fetchUrl"}}
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from .config import TransportSettings
from .logging import configure_logging

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB


class FetchUrlRequest(BaseModel):
    url: str


@dataclass(slots=True)
class DevMediaStore:
    """Writes uploads to disk and builds their public URLs."""

    root: Path
    public_base_url: str
    log: logging.Logger = field(default_factory=lambda: logger)

    def ensure_structure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    async def persist(self, upload: UploadFile) -> str:
        self.ensure_structure()
        suffix = Path(upload.filename or "").suffix
        name = f"{uuid.uuid4().hex}{suffix}"
        target = self.root / name
        size = 0
        with target.open("wb") as sink:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                sink.write(chunk)
        self.log.info(
            "maker_media.devserver.stored",
            extra={"filename": upload.filename, "stored_as": name, "size_bytes": size},
        )
        return f"{self.public_base_url.rstrip('/')}/media/{name}"


def _store(request: Request) -> DevMediaStore:
    return request.app.state.media_store  # type: ignore[no-any-return]


def create_app(settings: TransportSettings | None = None) -> FastAPI:
    settings = settings or TransportSettings()
    store = DevMediaStore(root=settings.dev_media_root, public_base_url=settings.dev_public_base_url)
    store.ensure_structure()

    app = FastAPI(title="Maker Media dev backend")
    app.state.media_store = store
    app.mount("/media", StaticFiles(directory=store.root), name="media")

    @app.post("/uploadFile")
    async def upload_file(request: Request) -> dict[str, Any]:
        form = await request.form()
        for _, value in form.multi_items():
            if isinstance(value, UploadFile):
                url = await _store(request).persist(value)
                return {"success": 1, "file": {"url": url, "name": value.filename}}
        logger.warning("maker_media.devserver.no_file")
        return {"success": 0}

    @app.post("/fetchUrl")
    async def fetch_url(payload: FetchUrlRequest) -> dict[str, Any]:
        # Remote images are referenced in place, not downloaded.
        return {"success": 1, "file": {"url": payload.url}}

    return app


def main() -> None:  # pragma: no cover - manual entry point
    import uvicorn

    configure_logging()
    uvicorn.run(create_app(), host="0.0.0.0", port=8008)


__all__ = ["DevMediaStore", "create_app", "main"]
