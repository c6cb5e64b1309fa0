"""Settings dataclasses for the capture engine and the hosted backend."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from . import ConfigurationError, env_int, env_seconds, env_str

DEFAULT_BATCH_SIZE = 3
DEFAULT_PAUSE_POLL_SECONDS = 0.1
DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_STORAGE_BUCKET = "client-files"
DEFAULT_BACKEND_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class CaptureSettings:
    batch_size: int = DEFAULT_BATCH_SIZE
    charts_per_meter: int = 0
    pause_poll_seconds: float = DEFAULT_PAUSE_POLL_SECONDS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS
    item_timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ConfigurationError.invalid_value("batch_size", self.batch_size, "must be a positive integer")
        if self.charts_per_meter <= 0:
            from ..metric_catalog import CHART_METRICS

            # frozen dataclass: fall back to the catalog size when unset
            object.__setattr__(self, "charts_per_meter", len(CHART_METRICS))
        if self.pause_poll_seconds <= 0:
            raise ConfigurationError.invalid_value("pause_poll_seconds", self.pause_poll_seconds, "must be positive")
        if self.max_attempts < 1:
            raise ConfigurationError.invalid_value("max_attempts", self.max_attempts, "at least one attempt is required")
        if self.retry_delay_seconds < 0:
            raise ConfigurationError.invalid_value("retry_delay_seconds", self.retry_delay_seconds, "must not be negative")
        if self.item_timeout_seconds is not None and self.item_timeout_seconds <= 0:
            raise ConfigurationError.invalid_value("item_timeout_seconds", self.item_timeout_seconds, "must be positive")


@lru_cache(maxsize=1)
def get_capture_settings() -> CaptureSettings:
    batch_size = env_int("CHART_CAPTURE_BATCH_SIZE", or_value=DEFAULT_BATCH_SIZE)
    charts_per_meter = env_int("CHART_CAPTURE_CHARTS_PER_METER", or_value=0)
    pause_poll = env_seconds("CHART_CAPTURE_PAUSE_POLL_SECONDS", or_value=DEFAULT_PAUSE_POLL_SECONDS)
    max_attempts = env_int("CHART_CAPTURE_MAX_ATTEMPTS", or_value=DEFAULT_MAX_ATTEMPTS)
    retry_delay = env_seconds("CHART_CAPTURE_RETRY_DELAY_SECONDS", or_value=DEFAULT_RETRY_DELAY_SECONDS)
    item_timeout = env_seconds("CHART_CAPTURE_ITEM_TIMEOUT_SECONDS")

    return CaptureSettings(
        batch_size=int(batch_size),
        charts_per_meter=int(charts_per_meter),
        pause_poll_seconds=float(pause_poll),
        max_attempts=int(max_attempts),
        retry_delay_seconds=float(retry_delay),
        item_timeout_seconds=item_timeout,
    )


@dataclass(frozen=True)
class BackendSettings:
    url: str
    service_key: str
    storage_bucket: str
    timeout_seconds: float

    def __post_init__(self) -> None:
        if not self.url.startswith(("http://", "https://")):
            raise ConfigurationError.invalid_value("SUPABASE_URL", self.url, "expected an http(s) URL")
        if not self.service_key:
            raise ConfigurationError.missing_value("SUPABASE_SERVICE_KEY")
        if self.timeout_seconds <= 0:
            raise ConfigurationError.invalid_value("SUPABASE_TIMEOUT_SECONDS", self.timeout_seconds, "must be positive")


@lru_cache(maxsize=1)
def get_backend_settings() -> BackendSettings:
    url = env_str("SUPABASE_URL", required=True)
    service_key = env_str("SUPABASE_SERVICE_KEY", required=True)
    if url is None or service_key is None:
        raise ConfigurationError.missing_value("SUPABASE_URL" if url is None else "SUPABASE_SERVICE_KEY")
    bucket = env_str("SUPABASE_STORAGE_BUCKET", or_value=DEFAULT_STORAGE_BUCKET)
    timeout = env_seconds("SUPABASE_TIMEOUT_SECONDS", or_value=DEFAULT_BACKEND_TIMEOUT_SECONDS)

    return BackendSettings(
        url=url.rstrip("/"),
        service_key=service_key,
        storage_bucket=bucket or DEFAULT_STORAGE_BUCKET,
        timeout_seconds=float(timeout),
    )


__all__ = [
    "BackendSettings",
    "CaptureSettings",
    "get_backend_settings",
    "get_capture_settings",
]
