"""Common test fixtures."""

import os
import time
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from shortshift.config import Settings
from shortshift.exceptions import ProviderError
from tests.fakes import FakeSubmitter


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        youtube_client_id="test-client-id",
        youtube_client_secret="test-client-secret",
        youtube_refresh_token="test-refresh-token",
    )


@pytest.fixture
def fake_submitter() -> FakeSubmitter:
    """Uploader that succeeds with video id ``abc123``."""
    return FakeSubmitter()


@pytest.fixture
def failing_submitter() -> FakeSubmitter:
    """Uploader that fails like a quota rejection."""
    return FakeSubmitter(
        error=ProviderError(
            "The request cannot be completed because you have exceeded your quota.",
            reason="quotaExceeded",
            provider_status=403,
        )
    )


@pytest.fixture
def override_app():
    """Install dependency overrides on the app and remove them afterwards."""
    from shortshift.core.dependencies import get_settings_dep, get_upload_submitter
    from shortshift.main import app

    def _override(submitter: Any, settings: Settings) -> Any:
        app.dependency_overrides[get_upload_submitter] = lambda: submitter
        app.dependency_overrides[get_settings_dep] = lambda: settings
        return app

    yield _override
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_app, fake_submitter, test_settings) -> TestClient:
    """Test client whose uploads go to ``fake_submitter``."""
    return TestClient(override_app(fake_submitter, test_settings))


@pytest.fixture
def valid_form() -> dict[str, str]:
    """Form fields that pass server validation."""
    return {
        "title": "Morning routine hacks",
        "description": "Three quick habits that changed my mornings.",
        "tags": "#morning, productivity, habits",
        "privacyStatus": "private",
        "madeForKids": "false",
        "notifySubscribers": "true",
        "categoryId": "26",
        "defaultLanguage": "en",
    }


@pytest.fixture
def video_file() -> dict[str, tuple[str, bytes, str]]:
    """A tiny stand-in for a video file."""
    return {"video": ("short.mp4", b"\x00" * 1024, "video/mp4")}


@pytest.fixture
def env_override():
    """Context manager for overriding environment variables."""
    def _override(**kwargs):
        return patch.dict(os.environ, kwargs, clear=False)
    return _override


@pytest.fixture
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after test."""
    from shortshift.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_youtube_build():
    """Patch the YouTube client factory used by the uploader.

    The mocked ``videos().insert().next_chunk()`` returns a finished upload
    with video id ``abc123`` by default.
    """
    with patch("shortshift.youtube.service.build") as mock_build:
        service = MagicMock()
        insert_request = MagicMock()
        insert_request.next_chunk.return_value = (None, {"id": "abc123"})
        service.videos.return_value.insert.return_value = insert_request
        mock_build.return_value = service
        yield service


@pytest.fixture
def local_timezone(monkeypatch):
    """Switch the process-local time zone for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(zone: str) -> None:
        monkeypatch.setenv("TZ", zone)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()
