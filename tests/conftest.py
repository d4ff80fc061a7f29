from __future__ import annotations

import pytest

from tests.mocks.collaborators import RecordingNotifier, RecordingSurface


@pytest.fixture(autouse=True)
def env(monkeypatch, tmp_path):
    monkeypatch.setenv("MAKER_MEDIA_REQUEST_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("MAKER_MEDIA_DEV_MEDIA_ROOT", str(tmp_path / "media"))
    monkeypatch.setenv("MAKER_MEDIA_DEV_PUBLIC_BASE_URL", "http://media.test")


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
