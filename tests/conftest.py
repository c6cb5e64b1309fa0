"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from chart_capture.config import runtime
from chart_capture.config.settings import CaptureSettings, get_backend_settings, get_capture_settings
from tests.helpers.capture_builders import FakeArtifactStore, FakeRenderer, RecordingObserver, StubAssembler

# Backend settings are read lazily; tests never reach a real backend
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")


@pytest.fixture(autouse=True)
def reset_configuration_caches():
    runtime._DEFAULT_VALUES = {}
    get_capture_settings.cache_clear()
    get_backend_settings.cache_clear()
    yield
    runtime._DEFAULT_VALUES = None
    get_capture_settings.cache_clear()
    get_backend_settings.cache_clear()


@pytest.fixture
def capture_settings() -> CaptureSettings:
    return CaptureSettings(batch_size=3, pause_poll_seconds=0.01, retry_delay_seconds=0.0)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def assembler() -> StubAssembler:
    return StubAssembler()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def artifact_store() -> FakeArtifactStore:
    return FakeArtifactStore()
