"""Observer callbacks for progress reporting."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ..data_models import CaptureLogEntry, MeterCaptureResult
from .exceptions import ObserverNotificationError

logger = logging.getLogger(__name__)


class CaptureObserver(Protocol):
    def on_progress(self, current: int, total: int, meter_number: str, metric_title: str, batch_label: str) -> None: ...

    def on_log_update(self, full_log: Sequence[CaptureLogEntry]) -> None: ...

    def on_meter_complete(self, result: MeterCaptureResult) -> None: ...

    def on_complete(
        self,
        total_success: int,
        total_failed: int,
        was_cancelled: bool,
        full_log: Sequence[CaptureLogEntry],
        meter_results: Sequence[MeterCaptureResult],
    ) -> None: ...

    def on_pause_state_change(self, is_paused: bool) -> None: ...


class NullCaptureObserver:
    """Observer that ignores every notification; subclass to pick callbacks."""

    def on_progress(self, current, total, meter_number, metric_title, batch_label) -> None:
        return None

    def on_log_update(self, full_log) -> None:
        return None

    def on_meter_complete(self, result) -> None:
        return None

    def on_complete(self, total_success, total_failed, was_cancelled, full_log, meter_results) -> None:
        return None

    def on_pause_state_change(self, is_paused) -> None:
        return None


class LoggingCaptureObserver(NullCaptureObserver):
    """Reports run progress through the logging module."""

    def __init__(self, log: logging.Logger = logger):
        self._log = log

    def on_progress(self, current, total, meter_number, metric_title, batch_label) -> None:
        self._log.info("[%d/%d] %s %s (%s)", current, total, meter_number, metric_title, batch_label)

    def on_meter_complete(self, result) -> None:
        self._log.info(
            "Meter %s finished: %d/%d charts captured in %dms",
            result.meter_number,
            result.charts_successful,
            result.charts_attempted,
            result.duration_ms,
        )
        if result.failed_metrics:
            self._log.warning("Meter %s failed metrics: %s", result.meter_number, ", ".join(result.failed_metrics))

    def on_complete(self, total_success, total_failed, was_cancelled, full_log, meter_results) -> None:
        state = "cancelled" if was_cancelled else "finished"
        self._log.info(
            "Capture %s: %d succeeded, %d failed across %d meters",
            state,
            total_success,
            total_failed,
            len(meter_results),
        )

    def on_pause_state_change(self, is_paused) -> None:
        self._log.info("Capture %s", "paused" if is_paused else "resumed")


class ObserverNotifier:
    """Forwards notifications to an observer and wraps callback failures."""

    def __init__(self, observer: CaptureObserver):
        self._observer = observer

    def _call(self, name: str, *args) -> None:
        try:
            getattr(self._observer, name)(*args)
        except (RuntimeError, ValueError, TypeError, AttributeError) as exc:
            logger.debug("Observer callback %s failed", name)
            raise ObserverNotificationError(f"Observer callback {name} failed") from exc

    def progress(self, current: int, total: int, meter_number: str, metric_title: str, batch_label: str) -> None:
        self._call("on_progress", current, total, meter_number, metric_title, batch_label)

    def log_update(self, full_log: Sequence[CaptureLogEntry]) -> None:
        self._call("on_log_update", full_log)

    def meter_complete(self, result: MeterCaptureResult) -> None:
        self._call("on_meter_complete", result)

    def complete(
        self,
        total_success: int,
        total_failed: int,
        was_cancelled: bool,
        full_log: Sequence[CaptureLogEntry],
        meter_results: Sequence[MeterCaptureResult],
    ) -> None:
        self._call("on_complete", total_success, total_failed, was_cancelled, full_log, meter_results)

    def pause_state_change(self, is_paused: bool) -> None:
        self._call("on_pause_state_change", is_paused)


__all__ = ["CaptureObserver", "LoggingCaptureObserver", "NullCaptureObserver", "ObserverNotifier"]
